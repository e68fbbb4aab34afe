import math
from collections import deque

import pygame

from env.constants import (
    UP, DOWN, LEFT, RIGHT, NONE, DELTAS, OPPOSITE, DECISION_ORDER,
    SCATTER, CHASE, FRIGHTENED, EATEN, GHOST_NAMES,
    BLINKY, PINKY, INKY, CLYDE, RELEASE_DELAYS,
    GHOST_SPEED, GHOST_FRIGHTENED_SPEED, GHOST_EATEN_SPEED, SPEED_PAD_MULTIPLIER,
    FRIGHTENED_DURATION, FRIGHTENED_FLASH_AT, CENTER_TOLERANCE, GHOST_TRAIL,
    FALLBACK_ENTRANCE, to_tile, tile_center,
)
from agents.player_agent import leading_edge, advance
from agents.targeting import TARGETING

MODE_SPEEDS = {
    SCATTER: GHOST_SPEED,
    CHASE: GHOST_SPEED,
    FRIGHTENED: GHOST_FRIGHTENED_SPEED,
    EATEN: GHOST_EATEN_SPEED,
}

# Configuração padrão do labirinto clássico: (spawn, direção, scatter, direção de saída)
DEFAULT_CONFIGS = {
    BLINKY: ((11, 14), LEFT, (0, 25), LEFT),
    PINKY: ((14, 14), DOWN, (0, 2), RIGHT),
    INKY: ((14, 12), UP, (29, 27), LEFT),
    CLYDE: ((14, 16), UP, (29, 0), RIGHT),
}

BOB_AMPLITUDE = 3
BOB_RATE = 0.005


# ══════════════════════════════════════════════════════════════════════════════
#  Fantasma
# ══════════════════════════════════════════════════════════════════════════════
class GhostAgent:
    """
    One of the four adversaries.

    Holds its own position, facing and mode, and follows the shared
    ``ModeSchedule`` handed to ``update``. Until its release delay elapses it
    just bobs inside the house; afterwards it is placed on the house entrance
    and re-decides its facing at the centre of every new tile.
    """

    def __init__(self, name):
        self.name = name
        self.target_fn = TARGETING[name]
        spawn, direction, scatter, release_direction = DEFAULT_CONFIGS[name]
        self.spawn = spawn
        self.start_direction = direction
        self.scatter_target = scatter
        self.release_direction = release_direction
        self.release_delay = RELEASE_DELAYS[name]
        self.entrance = FALLBACK_ENTRANCE
        self.trail = deque(maxlen=GHOST_TRAIL)
        self.reset()

    def configure(self, spawn, entrance, scatter_target):
        """Apply board-derived data; takes effect on the next ``reset``."""
        self.spawn = tuple(spawn.tile)
        self.start_direction = spawn.direction
        self.release_delay = spawn.release_delay
        self.release_direction = spawn.release_direction
        self.entrance = tuple(entrance)
        self.scatter_target = tuple(scatter_target)

    def reset(self):
        self.pos = pygame.math.Vector2(tile_center(self.spawn))
        self.direction = self.start_direction
        self.mode = SCATTER
        self.previous_mode = SCATTER
        self.speed = GHOST_SPEED
        self.fright_timer = 0.0
        self.flashing = False
        self.released = self.release_delay == 0
        self.release_timer = 0.0
        self.last_decision = None
        self.last_warp = None
        self.seen_flips = 0
        self.trail.clear()

    @property
    def tile(self):
        return to_tile(self.pos.x, self.pos.y)

    # ── Gatilhos externos ─────────────────────────────────────────────────────
    def frighten(self):
        if not self.released or self.mode == EATEN:
            return
        # Um segundo pellet só reinicia o tempo
        if self.mode != FRIGHTENED:
            self.previous_mode = self.mode
            self.mode = FRIGHTENED
        self.fright_timer = 0.0
        self.flashing = False
        self.reverse_direction()

    def eat(self):
        self.mode = EATEN
        self.fright_timer = 0.0
        self.flashing = False
        self.last_decision = None

    def reverse_direction(self):
        self.direction = OPPOSITE[self.direction]
        self.last_decision = None

    # ── Passo de simulação ────────────────────────────────────────────────────
    def update(self, dt, tilemap, player, schedule, lead_tile=None):
        if not self.released:
            self.release_timer += dt * 1000
            self._follow_schedule(schedule, reverse=False)
            if self.release_timer < self.release_delay:
                spawn_y = tile_center(self.spawn)[1]
                self.pos.y = spawn_y + math.sin(self.release_timer * BOB_RATE) * BOB_AMPLITUDE
                return
            self.released = True
            self.pos.update(tile_center(self.entrance))
            self.direction = self.release_direction
            self.last_decision = None

        self._update_mode(dt, schedule)

        mult = SPEED_PAD_MULTIPLIER if tilemap.is_speed_pad(self.tile) else 1
        self.speed = MODE_SPEEDS[self.mode] * mult
        step = self.speed * dt

        tile = self.tile
        cx, cy = tile_center(tile)
        tolerance = max(CENTER_TOLERANCE, step * 0.6)
        near_center = abs(self.pos.x - cx) < tolerance and abs(self.pos.y - cy) < tolerance
        if near_center and tile != self.last_decision:
            self.pos.update(cx, cy)
            self.last_decision = tile
            self.choose_direction(tilemap, player.tile, self.get_target(player, lead_tile))

        if self.can_move(self.direction, tilemap):
            advance(self.pos, self.direction, step)
        else:
            # Bloqueado: centraliza e decide de novo no próximo tick
            self.pos.update(cx, cy)
            self.last_decision = None

        self.pos.x = tilemap.wrap_x(self.pos.x)
        self._check_warp(tilemap)

        if self.mode == EATEN and self.reached_entrance():
            self.mode = schedule.mode
            self.previous_mode = self.mode
            self.seen_flips = schedule.flips
            self.last_decision = None

        self.trail.append(pygame.math.Vector2(self.pos))

    def _update_mode(self, dt, schedule):
        if self.mode == FRIGHTENED:
            self.fright_timer += dt * 1000
            self.flashing = self.fright_timer >= FRIGHTENED_FLASH_AT
            if self.fright_timer >= FRIGHTENED_DURATION:
                self.mode = self.previous_mode
                self.fright_timer = 0.0
                self.flashing = False
            self.seen_flips = schedule.flips
            return
        if self.mode == EATEN:
            self.seen_flips = schedule.flips
            return
        self._follow_schedule(schedule, reverse=True)

    def _follow_schedule(self, schedule, reverse):
        if schedule.flips == self.seen_flips:
            return
        self.seen_flips = schedule.flips
        self.mode = schedule.mode
        self.previous_mode = self.mode
        if reverse:
            self.reverse_direction()

    def reached_entrance(self):
        row, col = self.tile
        return row == self.entrance[0] and abs(col - self.entrance[1]) <= 1

    def _check_warp(self, tilemap):
        current = self.tile
        if current == self.last_warp:
            return
        dest = tilemap.get_warp_destination(current)
        if dest is not None:
            self.pos.update(tile_center(dest))
            self.last_warp = dest
            self.last_decision = None
        else:
            self.last_warp = None

    # ── Navegação ─────────────────────────────────────────────────────────────
    def can_move(self, direction, tilemap) -> bool:
        x, y = leading_edge(self.pos, direction)
        return tilemap.is_walkable(to_tile(tilemap.wrap_x(x), y), True, ignore_gate_state=True)

    def get_target(self, player, lead_tile=None):
        if self.mode == EATEN:
            return self.entrance
        if self.mode in (SCATTER, FRIGHTENED):
            return self.scatter_target
        return self.target_fn(player.tile, player.direction, lead_tile, self.tile, self.scatter_target)

    def choose_direction(self, tilemap, player_tile, target):
        row, col = self.tile
        reverse = OPPOSITE[self.direction]
        fleeing = self.mode == FRIGHTENED
        goal = player_tile if fleeing else target

        best_dir = None
        best_dist = None
        for d in DECISION_ORDER:
            if d == reverse:
                continue
            dr, dc = DELTAS[d]
            nxt = (row + dr, (col + dc) % tilemap.cols)
            if not tilemap.is_walkable(nxt, True, ignore_gate_state=True):
                continue
            dist = (row + dr - goal[0]) ** 2 + (col + dc - goal[1]) ** 2
            if best_dist is None or (dist > best_dist if fleeing else dist < best_dist):
                best_dist = dist
                best_dir = d

        if best_dir is None:
            best_dir = reverse if reverse != NONE else self.direction
        self.direction = best_dir
        return best_dir


def create_ghosts():
    return [GhostAgent(name) for name in GHOST_NAMES]
