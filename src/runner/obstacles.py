# src/runner/obstacles.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from .config import MS_PER_FRAME, MAX_GAP_COEFFICIENT, RunnerConfig

logger = logging.getLogger(__name__)


class ObstacleType(Enum):
    CACTUS_SMALL = "cactus_small"
    CACTUS_LARGE = "cactus_large"
    PTERODACTYL = "pterodactyl"


@dataclass(frozen=True)
class ObstacleSpec:
    width: int
    height: int
    y_positions: Tuple[int, ...]    # one is picked per spawn
    multiple_speed: float           # clusters only once the speed reaches this
    min_gap: int
    min_speed: float                # not spawned below this speed
    boxes: Tuple[Tuple[int, int, int, int], ...]
    speed_offset: float = 0.0       # +/- drift relative to the ground


CATALOG: Dict[ObstacleType, ObstacleSpec] = {
    ObstacleType.CACTUS_SMALL: ObstacleSpec(
        width=17, height=35, y_positions=(105,), multiple_speed=4, min_gap=120, min_speed=0,
        boxes=((0, 7, 5, 27), (4, 0, 6, 34), (10, 4, 7, 14)),
    ),
    ObstacleType.CACTUS_LARGE: ObstacleSpec(
        width=25, height=50, y_positions=(90,), multiple_speed=7, min_gap=120, min_speed=0,
        boxes=((0, 12, 7, 38), (8, 0, 7, 49), (13, 10, 10, 38)),
    ),
    ObstacleType.PTERODACTYL: ObstacleSpec(
        width=46, height=40, y_positions=(100, 75, 50), multiple_speed=999, min_gap=150, min_speed=8.5,
        boxes=((15, 15, 16, 5), (18, 21, 24, 6), (2, 14, 4, 3), (6, 10, 4, 7), (10, 8, 6, 9)),
        speed_offset=0.8,
    ),
}
assert set(CATALOG) == set(ObstacleType), "catalog must cover every ObstacleType"


@dataclass
class Obstacle:
    """One hazard: `size` copies of a catalog unit merged side by side."""
    type: ObstacleType
    x: float
    y: int
    size: int = 1
    gap: int = 0
    speed_offset: float = 0.0

    @property
    def spec(self) -> ObstacleSpec:
        return CATALOG[self.type]

    @property
    def unit_width(self) -> int:
        return self.spec.width

    @property
    def width(self) -> int:
        return self.spec.width * self.size

    @property
    def height(self) -> int:
        return self.spec.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), self.y, self.width, self.height)

    def collision_boxes(self) -> List[pygame.Rect]:
        """World-space boxes: the unit's boxes repeated once per unit."""
        ox = int(self.x)
        out: List[pygame.Rect] = []
        for i in range(self.size):
            ux = ox + i * self.unit_width
            out.extend(pygame.Rect(ux + bx, self.y + by, bw, bh) for bx, by, bw, bh in self.spec.boxes)
        return out

    def update(self, elapsed_ms: float, speed: float):
        self.x -= (speed + self.speed_offset) * elapsed_ms / MS_PER_FRAME

    def is_visible(self) -> bool:
        return self.right > 0


def get_gap(width: int, spec: ObstacleSpec, speed: float, gap_coefficient: float,
            rng: random.Random) -> int:
    """Distance that must open behind an obstacle before the next one spawns.

    Grows with speed, so the time the player has to react never shrinks.
    """
    min_gap = round(width * speed + spec.min_gap * gap_coefficient)
    max_gap = round(min_gap * MAX_GAP_COEFFICIENT)
    return rng.randint(min_gap, max_gap)


class ObstacleGenerator:
    """Decides when, what and how wide the next obstacle is."""

    def __init__(self, config: RunnerConfig, rng: random.Random):
        self.config = config
        self.rng = rng
        self.last_type: Optional[ObstacleType] = None
        self.last_size: int = 0

    def reset(self):
        self.last_type = None
        self.last_size = 0

    def spawn_room(self, obstacles: Sequence[Obstacle], visible_width: int) -> bool:
        if not obstacles:
            return True
        last = obstacles[-1]
        return last.is_visible() and last.right + last.gap < visible_width

    def candidate_types(self, speed: float) -> List[ObstacleType]:
        cap = self.config.max_obstacle_duplication
        eligible = [t for t in ObstacleType if speed >= CATALOG[t].min_speed]
        fresh = [t for t in eligible if not (t is self.last_type and self.last_size >= cap)]
        if fresh:
            return fresh
        # Starved by the duplication rule: take anything rather than skip the spawn.
        return eligible or list(ObstacleType)

    def create(self, speed: float, visible_width: int) -> Obstacle:
        kind = self.rng.choice(self.candidate_types(speed))
        spec = CATALOG[kind]

        size = 1
        if speed >= spec.multiple_speed:
            size = self.rng.randint(1, max(1, self.config.max_obstacle_duplication))

        offset = 0.0
        if spec.speed_offset:
            offset = spec.speed_offset if self.rng.random() > 0.5 else -spec.speed_offset

        y = self.rng.choice(spec.y_positions)
        gap = get_gap(spec.width * size, spec, speed, self.config.gap_coefficient, self.rng)
        obstacle = Obstacle(type=kind, x=float(visible_width), y=y, size=size, gap=gap, speed_offset=offset)

        self.last_type = kind
        self.last_size = size
        logger.debug("spawn %s x%d at x=%d gap=%d speed=%.2f", kind.name, size, visible_width, gap, speed)
        return obstacle

    def maybe_spawn(self, obstacles: List[Obstacle], speed: float, visible_width: int) -> List[Obstacle]:
        """Append a new obstacle when there is room for one; returns the list."""
        if self.spawn_room(obstacles, visible_width):
            obstacles.append(self.create(speed, visible_width))
        return obstacles
