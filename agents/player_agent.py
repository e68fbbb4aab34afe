from collections import deque

import pygame

from env.constants import (
    TILE, LEFT, RIGHT, UP, DOWN, NONE,
    PLAYER_SPEED, SPEED_PAD_MULTIPLIER, LOOKAHEAD, PLAYER_TRAIL,
    to_tile, tile_center,
)


def leading_edge(pos, direction):
    """Ponto logo à frente da meia-tile na direção do movimento."""
    reach = TILE / 2 - 1 + LOOKAHEAD
    x, y = pos.x, pos.y
    if direction == UP:
        y -= reach
    elif direction == DOWN:
        y += reach
    elif direction == LEFT:
        x -= reach
    elif direction == RIGHT:
        x += reach
    return x, y


def advance(pos, direction, dist):
    if direction == UP:
        pos.y -= dist
    elif direction == DOWN:
        pos.y += dist
    elif direction == LEFT:
        pos.x -= dist
    elif direction == RIGHT:
        pos.x += dist


# ══════════════════════════════════════════════════════════════════════════════
#  Jogador
# ══════════════════════════════════════════════════════════════════════════════
class PlayerAgent:
    """
    The player-controlled actor.

    Moves continuously along the grid, turning onto the buffered direction as
    soon as the tile in that direction is open and snapping onto the centre
    line of the new axis. Dead agents stand still and only count their death
    animation time.
    """

    def __init__(self, spawn=(23, 13), speed=PLAYER_SPEED):
        self.base_speed = speed
        self.spawn = spawn
        self.pos = pygame.math.Vector2(tile_center(spawn))
        self.direction = LEFT
        self.next_direction = LEFT
        self.speed = speed
        self.alive = True
        self.death_timer = 0.0
        self.trail = deque(maxlen=PLAYER_TRAIL)
        self.last_warp = None

    def set_spawn(self, tile):
        self.spawn = tuple(tile)

    def reset(self):
        self.pos = pygame.math.Vector2(tile_center(self.spawn))
        self.direction = LEFT
        self.next_direction = LEFT
        self.speed = self.base_speed
        self.alive = True
        self.death_timer = 0.0
        self.trail.clear()
        self.last_warp = None

    def kill(self):
        self.alive = False
        self.death_timer = 0.0

    @property
    def tile(self):
        return to_tile(self.pos.x, self.pos.y)

    def can_move(self, direction, tilemap) -> bool:
        if direction == NONE:
            return False
        x, y = leading_edge(self.pos, direction)
        return tilemap.is_walkable(to_tile(tilemap.wrap_x(x), y), False)

    def update(self, dt, tilemap):
        if not self.alive:
            self.death_timer += dt * 1000
            return

        # Tenta virar para a direção pedida
        if self.next_direction not in (NONE, self.direction):
            if self.can_move(self.next_direction, tilemap):
                self.direction = self.next_direction
                self._snap_to_grid()

        if not self.can_move(self.direction, tilemap):
            return

        mult = SPEED_PAD_MULTIPLIER if tilemap.is_speed_pad(self.tile) else 1
        self.speed = self.base_speed * mult
        advance(self.pos, self.direction, self.speed * dt)

        # Túnel
        self.pos.x = tilemap.wrap_x(self.pos.x)

        self._check_warp(tilemap)
        self.trail.append(pygame.math.Vector2(self.pos))

    def _check_warp(self, tilemap):
        current = self.tile
        if current == self.last_warp:
            return
        dest = tilemap.get_warp_destination(current)
        if dest is not None:
            self.pos.update(tile_center(dest))
            self.last_warp = dest
        else:
            self.last_warp = None

    def _snap_to_grid(self):
        row, col = self.tile
        cx, cy = tile_center((row, col))
        if self.direction in (UP, DOWN):
            self.pos.x = cx
        else:
            self.pos.y = cy
