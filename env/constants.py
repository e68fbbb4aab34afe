"""
Shared constants for the simulation core.

Distances are pixels, speeds are pixels per second and every duration is in
milliseconds. Tiles are addressed as (row, col).
"""

import math

TILE = 16
COLS, ROWS = 28, 31
WIDTH, HEIGHT = COLS * TILE, ROWS * TILE
FPS = 60
FIXED_DT = 1 / FPS

# ══════════════════════════════════════════════════════════════════════════════
#  Direções
# ══════════════════════════════════════════════════════════════════════════════
RIGHT, LEFT, UP, DOWN = 0, 1, 2, 3
NONE = -1

DIRECTION_NAMES = {RIGHT: "RIGHT", LEFT: "LEFT", UP: "UP", DOWN: "DOWN", NONE: "NONE"}

# (d_row, d_col) de cada direção
DELTAS = {RIGHT: (0, 1), LEFT: (0, -1), UP: (-1, 0), DOWN: (1, 0)}
OPPOSITE = {RIGHT: LEFT, LEFT: RIGHT, UP: DOWN, DOWN: UP, NONE: NONE}

# Ordem de desempate dos fantasmas
DECISION_ORDER = (UP, LEFT, DOWN, RIGHT)

# ══════════════════════════════════════════════════════════════════════════════
#  Tiles
# ══════════════════════════════════════════════════════════════════════════════
EMPTY, WALL, DOT, POWER, GATE, TUNNEL, GHOST_HOUSE, SPEED_PAD, WARP = range(9)

TILE_NAMES = {
    EMPTY: "empty", WALL: "wall", DOT: "dot", POWER: "power-pellet",
    GATE: "gate", TUNNEL: "tunnel", GHOST_HOUSE: "ghost-house",
    SPEED_PAD: "speed-pad", WARP: "warp-portal",
}

# ══════════════════════════════════════════════════════════════════════════════
#  Fantasmas
# ══════════════════════════════════════════════════════════════════════════════
SCATTER, CHASE, FRIGHTENED, EATEN = "scatter", "chase", "frightened", "eaten"

BLINKY, PINKY, INKY, CLYDE = "blinky", "pinky", "inky", "clyde"
GHOST_NAMES = (BLINKY, PINKY, INKY, CLYDE)

# ══════════════════════════════════════════════════════════════════════════════
#  Velocidades (px/s)
# ══════════════════════════════════════════════════════════════════════════════
PLAYER_SPEED = 80
GHOST_SPEED = 75
GHOST_FRIGHTENED_SPEED = 40
GHOST_EATEN_SPEED = 160
SPEED_PAD_MULTIPLIER = 1.5

# Quanto a borda dianteira olha além da meia-tile
LOOKAHEAD = 2
CENTER_TOLERANCE = 2

# ══════════════════════════════════════════════════════════════════════════════
#  Tempos (ms)
# ══════════════════════════════════════════════════════════════════════════════
FRIGHTENED_DURATION = 8000
FRIGHTENED_FLASH_AT = 6000
SCATTER_DURATIONS = (7000, 7000, 5000, 5000)
CHASE_DURATIONS = (20000, 20000, 20000, math.inf)
RELEASE_DELAYS = {BLINKY: 0, PINKY: 1500, INKY: 4000, CLYDE: 6500}

GATE_TOGGLE_INTERVAL = 15000
GATE_TELEGRAPH_DURATION = 3000

GHOST_EAT_FREEZE = 500
DEAD_DURATION = 1500

FRUIT_DOT_THRESHOLDS = (70, 170)
FRUIT_DURATION = 10000

# ══════════════════════════════════════════════════════════════════════════════
#  Pontuação
# ══════════════════════════════════════════════════════════════════════════════
SCORE_DOT = 10
SCORE_POWER = 50
SCORE_GHOST_BASE = 200

FRUIT_TYPES = (
    ("Cherry", 100), ("Strawberry", 300), ("Orange", 500), ("Apple", 700),
    ("Melon", 1000), ("Galaxian", 2000), ("Bell", 3000), ("Key", 5000),
)

# Colisão jogador x fantasma
COLLISION_RADIUS = TILE * 0.7

PLAYER_TRAIL = 8
GHOST_TRAIL = 6

# ══════════════════════════════════════════════════════════════════════════════
#  Validação de tabuleiros
# ══════════════════════════════════════════════════════════════════════════════
MIN_GHOST_HOUSE_TILES = 6
LOW_DOT_WARNING = 50

FALLBACK_ENTRANCE = (11, 14)
FALLBACK_FRUIT = (17, 14)


def to_tile(x: float, y: float):
    """Converte a posição contínua (pixels) para (Linha, Coluna)."""
    return int(y // TILE), int(x // TILE)


def tile_center(tile):
    """Centro em pixels (x, y) de uma tile (linha, coluna)."""
    row, col = tile
    return col * TILE + TILE / 2, row * TILE + TILE / 2
