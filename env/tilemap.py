"""
Runtime tile grid for one level: terrain, remaining dots, the periodic gate
and warp-portal lookup.
"""

import pygame

from env.constants import (
    TILE, COLS, ROWS,
    EMPTY, WALL, DOT, POWER, GATE, GHOST_HOUSE, SPEED_PAD,
    GATE_TOGGLE_INTERVAL, GATE_TELEGRAPH_DURATION,
    to_tile, tile_center,
)


class TileMap:
    def __init__(self, toggle_interval=GATE_TOGGLE_INTERVAL, telegraph_lead=GATE_TELEGRAPH_DURATION):
        self.toggle_interval = toggle_interval
        self.telegraph_lead = telegraph_lead
        self.board = None
        self.tiles = []
        self.rows = ROWS
        self.cols = COLS
        self.dots_remaining = 0
        self.total_dots = 0
        self.warps = {}

        self.gates_open = True
        self.gate_timer = 0.0
        self.gate_telegraph = False

    def load(self, board):
        """Rebuild everything from ``board``; also used to replay a level."""
        self.board = board
        self.rows = len(board.tiles)
        self.cols = len(board.tiles[0]) if board.tiles else COLS
        # Cópia mutável, nunca compartilhada com o BoardData
        self.tiles = [list(row) for row in board.tiles]
        self.dots_remaining = sum(1 for row in self.tiles for t in row if t in (DOT, POWER))
        self.total_dots = self.dots_remaining

        self.warps = {}
        for pair in board.warp_pairs:
            self.warps[pair.a] = pair.b
            self.warps[pair.b] = pair.a

        self.gates_open = True
        self.gate_timer = 0.0
        self.gate_telegraph = False

    def reset(self):
        if self.board is not None:
            self.load(self.board)

    def get_tile(self, row, col):
        # Fora do grid conta como parede
        if row < 0 or row >= self.rows or col < 0 or col >= self.cols:
            return WALL
        return self.tiles[row][col]

    def is_walkable(self, tile, is_ghost, ignore_gate_state=False) -> bool:
        t = self.get_tile(*tile)
        if t == WALL:
            return False
        if t == GATE:
            return is_ghost and (self.gates_open or ignore_gate_state)
        if t == GHOST_HOUSE:
            return is_ghost
        return True

    def is_speed_pad(self, tile) -> bool:
        return self.get_tile(*tile) == SPEED_PAD

    def get_warp_destination(self, tile):
        return self.warps.get(tuple(tile))

    def eat_dot(self, tile):
        """Consume the dot or pellet at ``tile``; returns DOT, POWER or None."""
        t = self.get_tile(*tile)
        if t not in (DOT, POWER):
            return None
        row, col = tile
        self.tiles[row][col] = EMPTY
        self.dots_remaining = max(0, self.dots_remaining - 1)
        return t

    def update_gate(self, dt_ms):
        self.gate_timer += dt_ms
        while self.toggle_interval > 0 and self.gate_timer >= self.toggle_interval:
            self.gate_timer -= self.toggle_interval
            self.gates_open = not self.gates_open
        # Aviso visual antes da troca
        self.gate_telegraph = self.toggle_interval - self.gate_timer <= self.telegraph_lead

    def toggle_gate(self):
        self.gates_open = not self.gates_open

    @staticmethod
    def to_tile(pos):
        return to_tile(pos[0], pos[1])

    @staticmethod
    def to_pixel(tile):
        return pygame.math.Vector2(tile_center(tile))

    def wrap_x(self, x):
        width = self.cols * TILE
        if x < 0:
            x += width
        if x >= width:
            x -= width
        return x
