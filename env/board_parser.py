"""
Board loader
============
Turns a textual board definition into immutable ``BoardData``.

Each definition is a fixed ``ROWS`` x ``COLS`` character grid (see ``SYMBOLS``).
Besides the terrain the loader derives everything the agents need at level
start: the player spawn, the ghost-house entrance above the gate, four ghost
spawns laid out inside the house, the fruit tile, the scatter corners and the
warp-portal pairs. Anything structurally wrong raises ``MalformedBoard``.
"""

import math
from dataclasses import dataclass, field

from env.constants import (
    COLS, ROWS,
    EMPTY, WALL, DOT, POWER, GATE, TUNNEL, GHOST_HOUSE, SPEED_PAD, WARP,
    LEFT, RIGHT, UP, DOWN,
    BLINKY, PINKY, INKY, CLYDE, RELEASE_DELAYS,
    FALLBACK_ENTRANCE, FALLBACK_FRUIT,
)

PLAYER_MARK = "P"

SYMBOLS = {
    "#": WALL,
    ".": DOT,
    "o": POWER,
    " ": EMPTY,
    PLAYER_MARK: EMPTY,
    "H": GHOST_HOUSE,
    "-": GATE,
    "T": TUNNEL,
    "S": SPEED_PAD,
}
SYMBOLS.update({str(d): WARP for d in range(1, 10)})

SCATTER_TARGETS = (
    (0, COLS - 3),         # blinky: canto superior direito
    (0, 2),                # pinky: canto superior esquerdo
    (ROWS - 2, COLS - 1),  # inky: canto inferior direito
    (ROWS - 2, 0),         # clyde: canto inferior esquerdo
)


class MalformedBoard(ValueError):
    """A board definition that cannot be turned into BoardData."""

    def __init__(self, board_name, reason, row=None, col=None):
        self.board_name = board_name
        self.reason = reason
        self.row = row
        self.col = col
        where = ""
        if row is not None:
            where = f" at row {row}" if col is None else f" at row {row}, col {col}"
        super().__init__(f'Board "{board_name}"{where}: {reason}')


@dataclass(frozen=True)
class BoardDefinition:
    name: str
    ascii: str
    description: str = ""


@dataclass(frozen=True)
class GhostSpawn:
    name: str
    tile: tuple
    direction: int
    release_delay: float
    release_direction: int


@dataclass(frozen=True)
class WarpPair:
    pair_id: str
    a: tuple
    b: tuple


@dataclass(frozen=True)
class BoardData:
    name: str
    tiles: tuple
    player_spawn: tuple
    ghost_house_entrance: tuple
    ghost_spawns: tuple
    fruit_spawn: tuple
    scatter_targets: tuple
    warp_pairs: tuple = ()
    has_speed_pads: bool = False
    dot_count: int = 0
    ghost_house_bounds: tuple = field(default=None)  # (min_row, min_col, max_row, max_col)
    gate_row: int = -1

    @property
    def width(self):
        return len(self.tiles[0]) if self.tiles else 0

    @property
    def height(self):
        return len(self.tiles)


def round_half_up(value):
    return int(math.floor(value + 0.5))


def parse_board(definition: BoardDefinition, symbols=None) -> BoardData:
    """Parse ``definition`` into BoardData or raise MalformedBoard."""
    symbols = symbols or SYMBOLS
    name = definition.name
    lines = [line for line in definition.ascii.split("\n") if len(line) > 0]
    if len(lines) != ROWS:
        raise MalformedBoard(name, f"has {len(lines)} rows, expected {ROWS}")

    tiles = []
    player_spawn = None
    warp_endpoints = {}
    house = []
    gate_row = -1
    has_speed_pads = False
    dot_count = 0

    for r, line in enumerate(lines):
        if len(line) != COLS:
            raise MalformedBoard(name, f"has {len(line)} cols, expected {COLS}", row=r)
        row = []
        for c, ch in enumerate(line):
            tile = symbols.get(ch)
            if tile is None:
                raise MalformedBoard(name, f"unknown symbol {ch!r}", row=r, col=c)
            row.append(tile)

            if ch == PLAYER_MARK:
                if player_spawn is not None:
                    raise MalformedBoard(
                        name, f"second player spawn (first at {player_spawn})", row=r, col=c)
                player_spawn = (r, c)
            if tile == WARP:
                warp_endpoints.setdefault(ch, []).append((r, c))
            if tile == SPEED_PAD:
                has_speed_pads = True
            if tile in (DOT, POWER):
                dot_count += 1
            if tile == GHOST_HOUSE:
                house.append((r, c))
            if tile == GATE:
                gate_row = r  # a última linha com portão vence
        tiles.append(tuple(row))

    if player_spawn is None:
        raise MalformedBoard(name, f"has no player spawn ({PLAYER_MARK})")

    # Entrada: uma linha acima do centro do portão
    if gate_row >= 0:
        gate_cols = [c for c, t in enumerate(tiles[gate_row]) if t == GATE]
        gate_center = round_half_up(sum(gate_cols) / len(gate_cols))
        entrance = (gate_row - 1, gate_center)
    else:
        entrance = FALLBACK_ENTRANCE

    bounds = None
    ghost_spawns = ()
    fruit_spawn = FALLBACK_FRUIT
    if house:
        min_row = min(r for r, _ in house)
        max_row = max(r for r, _ in house)
        min_col = min(c for _, c in house)
        max_col = max(c for _, c in house)
        bounds = (min_row, min_col, max_row, max_col)
        center_row = round_half_up((min_row + max_row) / 2)
        center_col = round_half_up((min_col + max_col) / 2)
        fruit_spawn = (max_row + 2, center_col)

        if gate_row >= 0:
            ghost_spawns = (
                GhostSpawn(BLINKY, entrance, LEFT, RELEASE_DELAYS[BLINKY], LEFT),
                GhostSpawn(PINKY, (center_row, center_col), DOWN, RELEASE_DELAYS[PINKY], RIGHT),
                GhostSpawn(INKY, (center_row, round_half_up((min_col + center_col) / 2)),
                           UP, RELEASE_DELAYS[INKY], LEFT),
                GhostSpawn(CLYDE, (center_row, round_half_up((center_col + max_col) / 2)),
                           UP, RELEASE_DELAYS[CLYDE], RIGHT),
            )

    # Só dígitos com exatamente dois extremos formam um par
    warp_pairs = tuple(
        WarpPair(pair_id, ends[0], ends[1])
        for pair_id, ends in sorted(warp_endpoints.items())
        if len(ends) == 2
    )

    return BoardData(
        name=name,
        tiles=tuple(tiles),
        player_spawn=player_spawn,
        ghost_house_entrance=entrance,
        ghost_spawns=ghost_spawns,
        fruit_spawn=fruit_spawn,
        scatter_targets=SCATTER_TARGETS,
        warp_pairs=warp_pairs,
        has_speed_pads=has_speed_pads,
        dot_count=dot_count,
        ghost_house_bounds=bounds,
        gate_row=gate_row,
    )
