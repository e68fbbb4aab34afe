import pytest

from env.constants import ROWS, COLS
from env.board import CLASSIC, WARP_GARDEN
from env.board_parser import BoardDefinition, parse_board
from env.tilemap import TileMap

# Passo fixo exato em ponto flutuante (1.25 px por tick para o jogador)
DT = 1 / 64

HOUSE = [(r, c) for r in (14, 15) for c in (13, 14, 15)]
GATE_TILES = [(13, 13), (13, 14), (13, 15)]
CORRIDOR = [(12, c) for c in range(1, 27)]
RING = ([(1, c) for c in range(1, 27)] + [(29, c) for c in range(1, 27)]
        + [(r, 1) for r in range(2, 29)] + [(r, 26) for r in range(2, 29)])
POCKET = [(27, 4), (27, 5), (27, 6)]


def grid_to_definition(name, grid):
    return BoardDefinition(name, "\n".join("".join(row) for row in grid))


def ring_grid(dots=50, spawn=(12, 5), warps=(), pocket=False):
    """
    Labirinto sintético 28x31: um anel na borda, um corredor na linha 12,
    casa 2x3 nas linhas 14-15 com portão de 3 tiles logo acima.
    As pastilhas ocupam as primeiras ``dots`` tiles abertas, começando pelo
    corredor logo à direita do spawn.
    """
    grid = [["#"] * COLS for _ in range(ROWS)]
    r0, c0 = spawn
    ordered = [(12, c) for c in range(c0 + 1, 27)] + RING + CORRIDOR
    if pocket:
        ordered = ordered + POCKET
    ordered = [t for t in dict.fromkeys(ordered) if t != spawn]
    for i, (r, c) in enumerate(ordered):
        grid[r][c] = "." if i < dots else " "
    for r, c in HOUSE:
        grid[r][c] = "H"
    for r, c in GATE_TILES:
        grid[r][c] = "-"
    for r, c, digit in warps:
        grid[r][c] = digit
    grid[r0][c0] = "P"
    return grid


def ring_board(**kw):
    return parse_board(grid_to_definition("Ring", ring_grid(**kw)))


@pytest.fixture
def classic():
    return parse_board(CLASSIC)


@pytest.fixture
def warp_garden():
    return parse_board(WARP_GARDEN)


@pytest.fixture
def ring():
    return ring_board()


@pytest.fixture
def pocket():
    """Jogador preso num bolsão isolado: nenhum fantasma o alcança."""
    return ring_board(spawn=(27, 5), pocket=True)


@pytest.fixture
def ring_map(ring):
    tilemap = TileMap()
    tilemap.load(ring)
    return tilemap
