import math

import pytest

from env.constants import (
    LEFT, RIGHT, UP, DOWN, NONE,
    SCATTER, CHASE, FRIGHTENED, EATEN,
    BLINKY, PINKY, INKY, CLYDE, GHOST_NAMES,
    tile_center,
)
from env.board_parser import parse_board
from env.tilemap import TileMap
from agents.player_agent import PlayerAgent
from agents.ghost_agent import GhostAgent, create_ghosts
from agents.mode_schedule import ModeSchedule
from agents.targeting import target_direct, target_ambush, target_flank, target_opportunist
from conftest import DT, ring_grid, ring_board, grid_to_definition


def load(board):
    tilemap = TileMap()
    tilemap.load(board)
    return tilemap


def place_player(tile, direction, x=None):
    player = PlayerAgent(spawn=tile)
    player.direction = direction
    player.next_direction = direction
    if x is not None:
        player.pos.x = x
    return player


def place_ghost(board, name, tile, direction, mode=SCATTER):
    """Fantasma já liberado, parado no centro de ``tile``."""
    ghost = GhostAgent(name)
    i = GHOST_NAMES.index(name)
    ghost.configure(board.ghost_spawns[i], board.ghost_house_entrance, board.scatter_targets[i])
    ghost.reset()
    ghost.released = True
    ghost.pos.update(tile_center(tile))
    ghost.direction = direction
    ghost.mode = mode
    ghost.previous_mode = mode
    return ghost


# ======================================================================
# TARGETING
# ======================================================================

def test_direct_targets_player_tile():
    assert target_direct((10, 10), RIGHT, None, (0, 0), (0, 25)) == (10, 10)


@pytest.mark.parametrize("direction, expected", [
    (RIGHT, (10, 14)),
    (LEFT, (10, 6)),
    (DOWN, (14, 10)),
    (UP, (6, 6)),
])
def test_ambush_four_tiles_ahead(direction, expected):
    assert target_ambush((10, 10), direction, None, (0, 0), (0, 2)) == expected


def test_flank_doubles_vector_from_lead():
    assert target_flank((10, 10), RIGHT, (8, 8), (0, 0), (29, 27)) == (12, 16)
    # Sem líder: só dois tiles à frente
    assert target_flank((10, 10), RIGHT, None, (0, 0), (29, 27)) == (10, 12)


def test_opportunist_retreats_when_close():
    scatter = (29, 0)
    assert target_opportunist((8, 1), LEFT, None, (0, 0), scatter) == (8, 1)
    assert target_opportunist((8, 0), LEFT, None, (0, 0), scatter) == scatter


def test_targets_may_leave_the_grid():
    assert target_ambush((1, 1), UP, None, (0, 0), (0, 2)) == (-3, -3)


# ======================================================================
# MODE SCHEDULE
# ======================================================================

def test_schedule_flip_ticks():
    schedule = ModeSchedule()
    flips = []
    for tick in range(1, 2200):
        if schedule.advance(DT * 1000):
            flips.append((tick, schedule.mode))
    assert flips == [(448, CHASE), (1728, SCATTER), (2176, CHASE)]


def test_schedule_ends_in_endless_chase():
    schedule = ModeSchedule()
    for ms in (7000, 20000, 7000, 20000, 5000):
        assert schedule.advance(ms)
    assert schedule.mode == CHASE
    assert schedule.limit == math.inf
    assert not schedule.advance(10 ** 9)
    assert schedule.flips == 5


def test_schedule_phase_index_moves_on_scatter_to_chase():
    schedule = ModeSchedule(scatter=(100,), chase=(200,))
    schedule.advance(100)
    assert (schedule.mode, schedule.phase_index) == (CHASE, 1)
    schedule.advance(200)
    assert (schedule.mode, schedule.phase_index) == (SCATTER, 1)
    schedule.reset()
    assert (schedule.mode, schedule.phase_index, schedule.flips) == (SCATTER, 0, 0)


# ======================================================================
# JOGADOR
# ======================================================================

def test_player_turn_snaps_cross_axis(ring_map):
    player = place_player((12, 1), LEFT, x=27)
    player.next_direction = UP
    player.update(DT, ring_map)
    assert player.direction == UP
    assert player.pos.x == 24
    assert player.pos.y == 198.75


def test_buffered_turn_waits_for_opening(ring_map):
    player = place_player((12, 5), RIGHT)
    player.next_direction = UP
    player.update(DT, ring_map)
    assert player.direction == RIGHT
    assert player.next_direction == UP
    assert player.pos.x == 89.25


def test_player_stops_at_wall(ring_map):
    player = place_player((12, 26), RIGHT)
    before = tuple(player.pos)
    player.update(DT, ring_map)
    assert tuple(player.pos) == before
    assert len(player.trail) == 0


def test_player_speed_pad():
    grid = ring_grid()
    grid[12][4] = "S"
    tilemap = load(parse_board(grid_to_definition("Pads", grid)))
    player = place_player((12, 4), RIGHT)
    player.update(DT, tilemap)
    assert player.speed == 120
    assert player.pos.x == 72 + 1.875


def test_player_tunnel_wrap():
    grid = ring_grid()
    grid[12][0] = "T"
    grid[12][27] = "T"
    tilemap = load(parse_board(grid_to_definition("Tunnel", grid)))
    player = place_player((12, 0), LEFT, x=1)
    player.update(DT, tilemap)
    assert player.pos.x == 447.75
    assert player.tile == (12, 27)


def test_player_warp_with_anti_bounce():
    tilemap = load(ring_board(warps=[(12, 10, "1"), (29, 20, "1")]))
    player = place_player((12, 9), RIGHT)

    player.update(0.125, tilemap)
    assert player.tile == (29, 20)
    assert tuple(player.pos) == tile_center((29, 20))

    # Ainda na tile de chegada: não volta
    player.update(DT, tilemap)
    assert player.tile == (29, 20)

    # Sai do portal e retorna
    player.update(0.125, tilemap)
    assert player.tile == (29, 21)
    assert player.last_warp is None
    player.next_direction = LEFT
    player.update(0.125, tilemap)
    assert player.tile == (12, 10)


def test_dead_player_only_counts_time(ring_map):
    player = place_player((12, 5), RIGHT)
    player.kill()
    player.update(0.5, ring_map)
    player.update(0.25, ring_map)
    assert player.death_timer == 750
    assert tuple(player.pos) == tile_center((12, 5))


def test_player_reset(ring_map):
    player = place_player((12, 5), RIGHT)
    player.update(0.25, ring_map)
    player.kill()
    player.reset()
    assert player.alive
    assert player.direction == LEFT
    assert tuple(player.pos) == tile_center((12, 5))
    assert player.death_timer == 0


def test_trails_are_bounded(ring, ring_map):
    player = place_player((12, 5), RIGHT)
    ghost = place_ghost(ring, BLINKY, (12, 20), RIGHT)
    schedule = ModeSchedule()
    for _ in range(20):
        player.update(DT, ring_map)
        ghost.update(DT, ring_map, player, schedule)
    assert len(player.trail) == 8
    assert len(ghost.trail) == 6
    assert player.trail[-1] == player.pos


def test_none_keeps_current_heading(ring_map):
    player = place_player((12, 5), RIGHT)
    player.next_direction = NONE
    player.update(DT, ring_map)
    assert player.direction == RIGHT


# ======================================================================
# FANTASMAS: DECISÃO DE DIREÇÃO
# ======================================================================

@pytest.mark.parametrize("target, expected", [
    ((0, 25), UP),
    ((12, 1), UP),     # empate: ordem UP, LEFT, DOWN, RIGHT
    ((29, 1), DOWN),
])
def test_choose_direction_minimizes_distance(ring, ring_map, target, expected):
    ghost = place_ghost(ring, BLINKY, (12, 1), LEFT)
    assert ghost.choose_direction(ring_map, (12, 5), target) == expected
    assert ghost.direction == expected


@pytest.mark.parametrize("player_tile, expected", [((20, 1), UP), ((5, 1), DOWN)])
def test_frightened_flees_player(ring, ring_map, player_tile, expected):
    ghost = place_ghost(ring, BLINKY, (12, 1), LEFT, mode=FRIGHTENED)
    assert ghost.choose_direction(ring_map, player_tile, ghost.scatter_target) == expected


def test_never_reverses_unless_dead_end(pocket):
    tilemap = load(pocket)
    ghost = place_ghost(pocket, BLINKY, (27, 4), LEFT)
    assert ghost.choose_direction(tilemap, (27, 5), (0, 0)) == RIGHT


def test_choice_excludes_reverse(ring, ring_map):
    ghost = place_ghost(ring, BLINKY, (12, 8), RIGHT)
    # O alvo fica atrás, mas só dá para seguir em frente
    assert ghost.choose_direction(ring_map, (12, 5), (12, 2)) == RIGHT


def test_targets_by_mode(ring):
    player = place_player((20, 1), DOWN)
    ghost = place_ghost(ring, PINKY, (12, 8), RIGHT, mode=CHASE)
    assert ghost.get_target(player) == (24, 1)
    ghost.mode = SCATTER
    assert ghost.get_target(player) == ghost.scatter_target == (0, 2)
    ghost.mode = FRIGHTENED
    assert ghost.get_target(player) == (0, 2)
    ghost.mode = EATEN
    assert ghost.get_target(player) == ring.ghost_house_entrance


# ======================================================================
# FANTASMAS: ESTADOS
# ======================================================================

def test_fright_flash_and_expiry(ring, ring_map):
    schedule = ModeSchedule()
    player = place_player((12, 5), LEFT)
    ghost = place_ghost(ring, BLINKY, (12, 20), RIGHT)
    ghost.frighten()
    assert ghost.mode == FRIGHTENED
    assert ghost.direction == LEFT

    flashing_from = None
    for tick in range(1, 513):
        ghost.update(DT, ring_map, player, schedule)
        if ghost.flashing and flashing_from is None:
            flashing_from = tick
        if tick == 511:
            assert ghost.mode == FRIGHTENED
    assert flashing_from == 384
    assert ghost.mode == SCATTER
    assert not ghost.flashing


def test_frightened_moves_at_reduced_speed(ring, ring_map):
    ghost = place_ghost(ring, BLINKY, (12, 20), RIGHT)
    ghost.frighten()
    ghost.update(DT, ring_map, place_player((12, 5), LEFT), ModeSchedule())
    assert ghost.speed == 40
    assert ghost.pos.x == tile_center((12, 20))[0] - 0.625


def test_second_pellet_only_restarts_timer(ring, ring_map):
    schedule = ModeSchedule()
    player = place_player((12, 5), LEFT)
    ghost = place_ghost(ring, BLINKY, (12, 20), RIGHT, mode=CHASE)
    ghost.frighten()
    for _ in range(300):
        ghost.update(DT, ring_map, player, schedule)
    ghost.frighten()
    assert ghost.fright_timer == 0
    assert ghost.previous_mode == CHASE
    for _ in range(512):
        ghost.update(DT, ring_map, player, schedule)
    assert ghost.mode == CHASE


def test_unreleased_and_eaten_ignore_frighten(ring):
    pinky = GhostAgent(PINKY)
    pinky.configure(ring.ghost_spawns[1], ring.ghost_house_entrance, ring.scatter_targets[1])
    pinky.reset()
    assert not pinky.released
    pinky.frighten()
    assert pinky.mode == SCATTER

    blinky = place_ghost(ring, BLINKY, (12, 20), RIGHT)
    blinky.eat()
    blinky.frighten()
    assert blinky.mode == EATEN


def test_frightened_ghost_skips_schedule_flips(ring, ring_map):
    schedule = ModeSchedule()
    player = place_player((12, 5), LEFT)
    ghost = place_ghost(ring, BLINKY, (12, 20), RIGHT)
    ghost.frighten()
    schedule.advance(7000)
    ghost.update(DT, ring_map, player, schedule)
    assert ghost.mode == FRIGHTENED
    assert ghost.seen_flips == schedule.flips


def test_schedule_flip_reverses_ghost(ring, ring_map):
    schedule = ModeSchedule()
    player = place_player((12, 5), LEFT)
    ghost = place_ghost(ring, BLINKY, (12, 20), RIGHT)
    ghost.update(DT, ring_map, player, schedule)
    assert ghost.direction == RIGHT
    schedule.advance(7000)
    ghost.update(DT, ring_map, player, schedule)
    assert ghost.mode == CHASE
    assert ghost.previous_mode == CHASE
    assert ghost.direction == LEFT


@pytest.mark.parametrize("schedule_ms, expected", [(0, SCATTER), (7000, CHASE)])
def test_eaten_ghost_returns_to_schedule_mode(ring, ring_map, schedule_ms, expected):
    schedule = ModeSchedule()
    if schedule_ms:
        schedule.advance(schedule_ms)
    player = place_player((12, 5), LEFT)
    ghost = place_ghost(ring, BLINKY, (12, 10), RIGHT)
    ghost.eat()
    for _ in range(200):
        ghost.update(DT, ring_map, player, schedule)
        if ghost.mode != EATEN:
            break
    assert ghost.mode == expected
    row, col = ghost.tile
    assert row == 12 and 13 <= col <= 15


def test_release_after_delay(ring, ring_map):
    schedule = ModeSchedule()
    player = place_player((12, 5), LEFT)
    pinky = GhostAgent(PINKY)
    pinky.configure(ring.ghost_spawns[1], ring.ghost_house_entrance, ring.scatter_targets[1])
    pinky.reset()
    for _ in range(95):
        pinky.update(DT, ring_map, player, schedule)
    assert not pinky.released
    assert pinky.pos.x == tile_center((15, 14))[0]
    pinky.update(DT, ring_map, player, schedule)
    assert pinky.released
    assert pinky.tile == ring.ghost_house_entrance


def test_unreleased_ghost_follows_schedule_silently(ring, ring_map):
    schedule = ModeSchedule()
    clyde = GhostAgent(CLYDE)
    clyde.configure(ring.ghost_spawns[3], ring.ghost_house_entrance, ring.scatter_targets[3])
    clyde.reset()
    direction = clyde.direction
    schedule.advance(7000)
    clyde.update(DT, ring_map, place_player((12, 5), LEFT), schedule)
    assert clyde.mode == CHASE
    assert clyde.direction == direction


# ======================================================================
# FANTASMAS: TERRENO
# ======================================================================

def test_ghost_warp_with_independent_anti_bounce():
    board = ring_board(warps=[(12, 10, "1"), (29, 20, "1")])
    tilemap = load(board)
    player = place_player((12, 5), LEFT)
    schedule = ModeSchedule()
    blinky = place_ghost(board, BLINKY, (12, 9), RIGHT)
    pinky = place_ghost(board, PINKY, (12, 9), RIGHT)

    blinky.update(0.125, tilemap, player, schedule)
    assert blinky.tile == (29, 20)
    assert blinky.last_warp == (29, 20)
    assert pinky.last_warp is None

    pinky.update(0.125, tilemap, player, schedule)
    assert pinky.tile == (29, 20)

    # Sai da tile de chegada sem voltar pelo portal
    for _ in range(10):
        blinky.update(DT, tilemap, player, schedule)
        assert blinky.tile[0] == 29
    assert blinky.tile == (29, 21)
    assert blinky.last_warp is None


def test_ghost_tunnel_wraps_both_edges():
    grid = ring_grid()
    grid[12][0] = "T"
    grid[12][27] = "T"
    board = parse_board(grid_to_definition("Tunnel", grid))
    tilemap = load(board)
    player = place_player((12, 5), LEFT)

    ghost = place_ghost(board, BLINKY, (12, 0), LEFT)
    ghost.pos.x = 1
    ghost.last_decision = (12, 0)
    ghost.update(DT, tilemap, player, ModeSchedule())
    assert ghost.pos.x == 447.828125
    assert ghost.tile == (12, 27)

    ghost = place_ghost(board, BLINKY, (12, 27), RIGHT)
    ghost.pos.x = 447
    ghost.last_decision = (12, 27)
    ghost.update(DT, tilemap, player, ModeSchedule())
    assert ghost.pos.x == 0.171875
    assert ghost.tile == (12, 0)


def test_ghost_speed_pad():
    grid = ring_grid()
    grid[12][20] = "S"
    board = parse_board(grid_to_definition("Pads", grid))
    ghost = place_ghost(board, BLINKY, (12, 20), RIGHT)
    ghost.update(DT, load(board), place_player((12, 5), LEFT), ModeSchedule())
    assert ghost.speed == 75 * 1.5


def test_eaten_ghost_speed(ring, ring_map):
    ghost = place_ghost(ring, BLINKY, (12, 20), RIGHT)
    ghost.eat()
    ghost.update(DT, ring_map, place_player((12, 5), LEFT), ModeSchedule())
    assert ghost.speed == 160
    assert ghost.pos.x == tile_center((12, 20))[0] + 2.5


def test_ghost_blocked_by_wall_snaps_to_centre(ring, ring_map):
    """Borda dianteira na parede: volta ao centro e decide de novo."""
    ghost = place_ghost(ring, BLINKY, (12, 26), RIGHT)
    ghost.pos.update(425, 201)
    ghost.last_decision = (12, 26)
    ghost.update(DT, ring_map, place_player((12, 5), LEFT), ModeSchedule())
    assert tuple(ghost.pos) == tile_center((12, 26))
    assert ghost.last_decision is None


def test_reset_restores_spawn(ring):
    ghost = place_ghost(ring, INKY, (12, 20), RIGHT, mode=FRIGHTENED)
    ghost.reset()
    assert ghost.mode == SCATTER
    assert not ghost.released
    assert ghost.tile == ring.ghost_spawns[2].tile
    assert ghost.direction == UP


def test_create_ghosts_order():
    assert [g.name for g in create_ghosts()] == [BLINKY, PINKY, INKY, CLYDE]
