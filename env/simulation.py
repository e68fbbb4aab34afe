"""
Simulation coordinator
======================
Advances one fixed timestep of play: the player, the four ghosts, the gate,
dot and fruit consumption and player/ghost collisions, in that order.

Every tick returns the list of ``SimEvent`` it produced; listeners registered
with ``add_listener`` receive the same events once the tick has finished.
Listeners must not mutate the simulation from inside the callback.
"""

import logging
from dataclasses import dataclass

from env.constants import (
    NONE, DOT, POWER, FRIGHTENED, EATEN,
    SCORE_DOT, SCORE_POWER, SCORE_GHOST_BASE,
    GHOST_EAT_FREEZE, COLLISION_RADIUS, tile_center,
)
from env.tilemap import TileMap
from env.fruit import FruitSpawner
from agents.player_agent import PlayerAgent
from agents.ghost_agent import create_ghosts
from agents.mode_schedule import ModeSchedule

log = logging.getLogger(__name__)

DOT_EATEN = "dot_eaten"
PELLET_EATEN = "pellet_eaten"
FRUIT_EATEN = "fruit_eaten"
GHOST_EATEN = "ghost_eaten"
PLAYER_KILLED = "player_killed"
FRIGHTENED_CLEARED = "frightened_cleared"
LEVEL_CLEAR = "level_clear"


@dataclass(frozen=True)
class SimEvent:
    kind: str
    points: int = 0
    position: tuple = None
    tile: tuple = None
    combo: int = 0


# ══════════════════════════════════════════════════════════════════════════════
#  StateSnapshot
# ══════════════════════════════════════════════════════════════════════════════
class StateSnapshot:
    __slots__ = (
        "player_pos", "player_dir", "player_alive",
        "ghost_positions", "ghost_directions", "ghost_modes", "ghost_flashing",
        "dots_remaining", "gates_open", "gate_telegraph",
        "fruit", "frozen", "level", "level_cleared",
    )

    def __init__(self, **kw):
        for k, v in kw.items():
            object.__setattr__(self, k, v)

    def __setattr__(self, *_):
        raise AttributeError("StateSnapshot is immutable")

    def __eq__(self, other):
        return isinstance(other, StateSnapshot) and all(
            getattr(self, k) == getattr(other, k) for k in self.__slots__
        )

    def __hash__(self):
        return hash(tuple(getattr(self, k) for k in self.__slots__))


# ══════════════════════════════════════════════════════════════════════════════
#  Simulation
# ══════════════════════════════════════════════════════════════════════════════
class Simulation:
    def __init__(self, tilemap=None, player=None, ghosts=None, schedule=None,
                 freeze_ms=GHOST_EAT_FREEZE):
        self.tilemap = tilemap or TileMap()
        self.player = player or PlayerAgent()
        self.ghosts = ghosts or create_ghosts()
        self.schedule = schedule or ModeSchedule()
        self.freeze_ms = freeze_ms
        self.fruit = FruitSpawner()
        self.listeners = []

        self.board = None
        self.level = 1
        self.freeze_timer = 0.0
        self.ghost_combo = 0
        self.dots_eaten = 0
        self.level_cleared = False

    @property
    def lead_ghost(self):
        return self.ghosts[0]

    def add_listener(self, fn):
        self.listeners.append(fn)

    # ── Ciclo de vida ─────────────────────────────────────────────────────────
    def load_level(self, board, level=1):
        """Fully re-initialise the core for ``board``."""
        self.board = board
        self.level = level
        self.tilemap.load(board)
        self.player.set_spawn(board.player_spawn)
        for i, ghost in enumerate(self.ghosts):
            if i < len(board.ghost_spawns):
                scatter = board.scatter_targets[i] if i < len(board.scatter_targets) else board.scatter_targets[0]
                ghost.configure(board.ghost_spawns[i], board.ghost_house_entrance, scatter)
        self.fruit = FruitSpawner(board.fruit_spawn, level)
        self.dots_eaten = 0
        self.level_cleared = False
        self.reset_positions()
        log.info("Level %d loaded: %s (%d dots)", level, board.name, self.tilemap.dots_remaining)

    def reset_positions(self):
        """Put every agent back on its spawn; the dots stay as they are."""
        self.player.reset()
        for ghost in self.ghosts:
            ghost.reset()
        self.schedule.reset()
        self.freeze_timer = 0.0
        self.ghost_combo = 0

    def toggle_gate(self):
        self.tilemap.toggle_gate()

    def frighten_all(self):
        self.ghost_combo = 0
        for ghost in self.ghosts:
            ghost.frighten()

    # ── Passo fixo ────────────────────────────────────────────────────────────
    def step(self, desired_direction, dt):
        events = self._step(desired_direction, dt)
        for event in events:
            for fn in self.listeners:
                fn(event)
        return events

    def _step(self, desired_direction, dt):
        if self.level_cleared:
            return []

        # Congelamento após comer um fantasma
        if self.freeze_timer > 0:
            self.freeze_timer = max(0.0, self.freeze_timer - dt * 1000)
            return []

        player = self.player
        if not player.alive:
            player.update(dt, self.tilemap)
            return []

        events = []
        if desired_direction is not None and desired_direction != NONE:
            player.next_direction = desired_direction
        player.update(dt, self.tilemap)

        self.schedule.advance(dt * 1000)
        was_frightened = [g.mode == FRIGHTENED for g in self.ghosts]

        # O líder anda primeiro; os outros leem a tile dele já atualizada
        lead = self.lead_ghost
        lead.update(dt, self.tilemap, player, self.schedule)
        lead_tile = lead.tile
        for ghost in self.ghosts[1:]:
            ghost.update(dt, self.tilemap, player, self.schedule, lead_tile)

        self.tilemap.update_gate(dt * 1000)

        self._eat_dots(events)
        self._eat_fruit(dt, events)
        killed = self._resolve_collisions(events)

        if not killed:
            left_fright = any(
                before and g.mode != FRIGHTENED for before, g in zip(was_frightened, self.ghosts)
            )
            if left_fright and not any(g.mode == FRIGHTENED for g in self.ghosts):
                events.append(SimEvent(FRIGHTENED_CLEARED))

            if self.tilemap.dots_remaining <= 0:
                self.level_cleared = True
                events.append(SimEvent(LEVEL_CLEAR, tile=player.tile))
                log.info("Level %d cleared", self.level)
        return events

    def _eat_dots(self, events):
        tile = self.player.tile
        eaten = self.tilemap.eat_dot(tile)
        if eaten is None:
            return
        self.dots_eaten += 1
        if eaten == DOT:
            events.append(SimEvent(DOT_EATEN, SCORE_DOT, tile_center(tile), tile))
        elif eaten == POWER:
            events.append(SimEvent(PELLET_EATEN, SCORE_POWER, tile_center(tile), tile))
            self.frighten_all()
        self.fruit.on_dot_eaten(self.dots_eaten)

    def _eat_fruit(self, dt, events):
        fruit = self.fruit.update(dt, self.player.pos)
        if fruit is not None:
            events.append(SimEvent(FRUIT_EATEN, fruit.points, tile_center(fruit.tile), fruit.tile))

    def _resolve_collisions(self, events):
        player = self.player
        killed = False
        for ghost in self.ghosts:
            if not ghost.released:
                continue
            if player.pos.distance_to(ghost.pos) >= COLLISION_RADIUS:
                continue
            if ghost.mode == FRIGHTENED:
                points = SCORE_GHOST_BASE * 2 ** self.ghost_combo
                ghost.eat()
                events.append(SimEvent(GHOST_EATEN, points, tuple(ghost.pos), ghost.tile, self.ghost_combo))
                self.ghost_combo += 1
                self.freeze_timer = self.freeze_ms
            elif ghost.mode != EATEN:
                killed = True

        if killed:
            player.kill()
            self.freeze_timer = 0.0
            events.append(SimEvent(PLAYER_KILLED, position=tuple(player.pos), tile=player.tile))
            log.debug("Player killed at %s", player.tile)
        return killed

    # ── Snapshot ──────────────────────────────────────────────────────────────
    def snapshot(self) -> StateSnapshot:
        fruit = self.fruit.fruit
        return StateSnapshot(
            player_pos=tuple(self.player.pos),
            player_dir=self.player.direction,
            player_alive=self.player.alive,
            ghost_positions=tuple(tuple(g.pos) for g in self.ghosts),
            ghost_directions=tuple(g.direction for g in self.ghosts),
            ghost_modes=tuple(g.mode for g in self.ghosts),
            ghost_flashing=tuple(g.flashing for g in self.ghosts),
            dots_remaining=self.tilemap.dots_remaining,
            gates_open=self.tilemap.gates_open,
            gate_telegraph=self.tilemap.gate_telegraph,
            fruit=(fruit.name, fruit.tile) if fruit else None,
            frozen=self.freeze_timer > 0,
            level=self.level,
            level_cleared=self.level_cleared,
        )
