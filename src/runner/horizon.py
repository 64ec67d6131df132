# src/runner/horizon.py
from __future__ import annotations
import math
import random
from dataclasses import dataclass
from typing import List

import pygame

from .config import (
    MS_PER_FRAME, CLOUD_W, CLOUD_H, MIN_CLOUD_GAP, MAX_CLOUD_GAP,
    MAX_SKY_LEVEL, MIN_SKY_LEVEL, Dimensions, RunnerConfig
)
from .obstacles import Obstacle, ObstacleGenerator


@dataclass
class Cloud:
    """Background decoration. Parallax only, never collides."""
    x: float
    y: int
    gap: int

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), self.y, CLOUD_W, CLOUD_H)

    def update(self, dx: float):
        self.x -= dx

    def is_visible(self) -> bool:
        return self.x + CLOUD_W > 0


class Horizon:
    """
    The scrolling world: ground line, clouds and the obstacle queue.
    obstacles[0] is always the one nearest the figure (spawn order).
    """
    def __init__(self, dimensions: Dimensions, config: RunnerConfig, rng: random.Random):
        self.dimensions = dimensions
        self.config = config
        self.rng = rng
        self.generator = ObstacleGenerator(config, rng)
        self.obstacles: List[Obstacle] = []
        self.clouds: List[Cloud] = []
        self.ground_offset = 0.0
        self.inverted = False
        self.add_cloud()

    def apply_config(self, config: RunnerConfig):
        self.config = config
        self.generator.config = config

    # --- clouds ---

    def add_cloud(self):
        self.clouds.append(Cloud(
            x=float(self.dimensions.width),
            y=self.rng.randint(MAX_SKY_LEVEL, MIN_SKY_LEVEL),
            gap=self.rng.randint(MIN_CLOUD_GAP, MAX_CLOUD_GAP),
        ))

    def update_clouds(self, elapsed_ms: float, speed: float):
        if not self.clouds:
            self.add_cloud()
            return

        # At least 1 px per canonical frame, scaled by the frames elapsed.
        per_frame = math.ceil(self.config.bg_cloud_speed / 1000.0 * MS_PER_FRAME * speed)
        dx = per_frame * elapsed_ms / MS_PER_FRAME
        for cloud in self.clouds:
            cloud.update(dx)

        last = self.clouds[-1]
        if (len(self.clouds) < self.config.max_clouds
                and (self.dimensions.width - last.x) > last.gap
                and self.config.cloud_frequency > self.rng.random()):
            self.add_cloud()

        self.clouds = [c for c in self.clouds if c.is_visible()]

    # --- obstacles ---

    def update_obstacles(self, elapsed_ms: float, speed: float):
        for obstacle in self.obstacles:
            obstacle.update(elapsed_ms, speed)

        # Retire off-screen obstacles
        self.obstacles = [o for o in self.obstacles if o.is_visible()]

        self.generator.maybe_spawn(self.obstacles, speed, self.dimensions.width)

    def nearest_obstacle(self) -> Obstacle | None:
        return self.obstacles[0] if self.obstacles else None

    # --- frame ---

    def update(self, elapsed_ms: float, speed: float, has_obstacles: bool, inverted: bool = False):
        """Scroll everything left by `speed` per canonical frame of `elapsed_ms`."""
        self.inverted = inverted
        self.ground_offset = (self.ground_offset + speed * elapsed_ms / MS_PER_FRAME) % self.dimensions.width
        self.update_clouds(elapsed_ms, speed)
        if has_obstacles:
            self.update_obstacles(elapsed_ms, speed)

    def reset(self):
        self.obstacles = []
        self.clouds = []
        self.ground_offset = 0.0
        self.inverted = False
        self.generator.reset()
