import pygame

from env.constants import TILE, FRUIT_DOT_THRESHOLDS, FRUIT_DURATION, FRUIT_TYPES, tile_center


class Fruit:
    __slots__ = ("tile", "type_index", "timer")

    def __init__(self, tile, type_index):
        self.tile = tile
        self.type_index = type_index
        self.timer = 0.0

    @property
    def name(self):
        return FRUIT_TYPES[self.type_index][0]

    @property
    def points(self):
        return FRUIT_TYPES[self.type_index][1]


class FruitSpawner:
    """Bonus fruit that appears after a number of dots and expires on its own."""

    def __init__(self, spawn_tile=(17, 14), level=1,
                 thresholds=FRUIT_DOT_THRESHOLDS, duration=FRUIT_DURATION):
        self.spawn_tile = tuple(spawn_tile)
        self.level = level
        self.thresholds = tuple(thresholds)
        self.duration = duration
        self.spawned = 0
        self.fruit = None

    def on_dot_eaten(self, dots_eaten):
        if self.spawned >= len(self.thresholds):
            return None
        if dots_eaten < self.thresholds[self.spawned]:
            return None
        type_index = min(self.level - 1, len(FRUIT_TYPES) - 1)
        self.fruit = Fruit(self.spawn_tile, type_index)
        self.spawned += 1
        return self.fruit

    def update(self, dt, player_pos):
        """Advance the active fruit; returns it if the player just ate it."""
        fruit = self.fruit
        if fruit is None:
            return None
        fruit.timer += dt * 1000
        if fruit.timer >= self.duration:
            self.fruit = None
            return None
        offset = pygame.math.Vector2(player_pos) - pygame.math.Vector2(tile_center(fruit.tile))
        if abs(offset.x) < TILE and abs(offset.y) < TILE:
            self.fruit = None
            return fruit
        return None
