"""
Board validator
===============
Structural and reachability checks over parsed BoardData. Never mutates the
board and never raises: every problem becomes a hard error (board unusable)
or a soft warning (board usable but suspicious).
"""

import logging
from dataclasses import dataclass, field

from env.constants import (
    COLS, ROWS, WALL, DOT, POWER, GATE, GHOST_HOUSE,
    MIN_GHOST_HOUSE_TILES, LOW_DOT_WARNING,
)
from problems.reachability_problem import BoardGridProblem, breadth_first_reachable

log = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    valid: bool
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)


def _count(tiles, kind):
    return sum(1 for row in tiles for t in row if t == kind)


def validate_board(board, name=None) -> ValidationResult:
    name = name or board.name
    tiles = board.tiles
    errors = []
    warnings = []

    # Dimensões
    if len(tiles) != ROWS:
        errors.append(f"Expected {ROWS} rows, got {len(tiles)}")
    for r, row in enumerate(tiles):
        if len(row) != COLS:
            errors.append(f"Row {r}: expected {COLS} cols, got {len(row)}")

    # Spawn do jogador em tile andável
    sr, sc = board.player_spawn
    spawn_tile = WALL
    if 0 <= sr < len(tiles) and 0 <= sc < len(tiles[sr]):
        spawn_tile = tiles[sr][sc]
    if spawn_tile in (WALL, GATE, GHOST_HOUSE):
        errors.append(f"Player spawn ({sr},{sc}) is not walkable or out of bounds")

    house_count = _count(tiles, GHOST_HOUSE)
    if house_count < MIN_GHOST_HOUSE_TILES:
        errors.append(f"Ghost house has {house_count} tiles, need at least {MIN_GHOST_HOUSE_TILES}")

    if _count(tiles, GATE) < 1:
        errors.append("No gate tiles found")

    # BFS a partir do spawn (com túnel nas bordas)
    reachable = breadth_first_reachable(BoardGridProblem(board.player_spawn, tiles))

    unreachable = [
        (r, c) for r, row in enumerate(tiles) for c, t in enumerate(row)
        if t in (DOT, POWER) and (r, c) not in reachable
    ]
    if unreachable:
        errors.append(f"{len(unreachable)} dot/power tiles unreachable from player spawn")

    for pair in board.warp_pairs:
        for label, end in (("A", pair.a), ("B", pair.b)):
            if end not in reachable:
                warnings.append(f"Warp {pair.pair_id} endpoint {label} {end} unreachable")

    if board.dot_count == 0:
        errors.append("Board has no dots")
    elif board.dot_count < LOW_DOT_WARNING:
        warnings.append(f"Board has only {board.dot_count} dots (very few)")

    valid = not errors
    if not valid:
        log.warning("[%s] INVALID: %s", name, "; ".join(errors))
    if warnings:
        log.warning("[%s] warnings: %s", name, "; ".join(warnings))
    if valid and not warnings:
        log.info("[%s] OK (%d dots)", name, board.dot_count)

    return ValidationResult(valid, errors, warnings)
