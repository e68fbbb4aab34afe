"""
Personality targeting.

Every ghost outside frightened/eaten aims at a tile picked by one of these pure
functions. All of them share one signature:

    target(player_tile, player_direction, lead_tile, own_tile, scatter_target)

and return a (row, col) tile, which may lie outside the grid.
"""

from env.constants import UP, DELTAS, BLINKY, PINKY, INKY, CLYDE

AMBUSH_AHEAD = 4
FLANK_AHEAD = 2
RETREAT_DISTANCE_SQ = 64


def ahead(tile, direction, n):
    row, col = tile
    dr, dc = DELTAS.get(direction, (0, 0))
    return row + dr * n, col + dc * n


def target_direct(player_tile, player_direction, lead_tile, own_tile, scatter_target):
    return player_tile


def target_ambush(player_tile, player_direction, lead_tile, own_tile, scatter_target):
    row, col = ahead(player_tile, player_direction, AMBUSH_AHEAD)
    # Olhando para cima o alvo também desloca 4 para a esquerda (quirk do arcade)
    if player_direction == UP:
        col -= AMBUSH_AHEAD
    return row, col


def target_flank(player_tile, player_direction, lead_tile, own_tile, scatter_target):
    row, col = ahead(player_tile, player_direction, FLANK_AHEAD)
    if lead_tile is None:
        return row, col
    lr, lc = lead_tile
    return 2 * row - lr, 2 * col - lc


def target_opportunist(player_tile, player_direction, lead_tile, own_tile, scatter_target):
    dr = player_tile[0] - own_tile[0]
    dc = player_tile[1] - own_tile[1]
    if dr * dr + dc * dc > RETREAT_DISTANCE_SQ:
        return player_tile
    return scatter_target


TARGETING = {
    BLINKY: target_direct,
    PINKY: target_ambush,
    INKY: target_flank,
    CLYDE: target_opportunist,
}
