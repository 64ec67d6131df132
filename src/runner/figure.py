# src/runner/figure.py
from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Tuple

import pygame

from .config import (
    MS_PER_FRAME, FIGURE_BOXES_RUNNING, FIGURE_BOXES_DUCKING, FigureConfig
)

logger = logging.getLogger(__name__)


class Status(Enum):
    WAITING = "waiting"
    RUNNING = "running"
    JUMPING = "jumping"
    DUCKING = "ducking"
    CRASHED = "crashed"


# Every status owns a box set; a missing entry fails at import time.
_BOXES_BY_STATUS: Dict[Status, Tuple[Tuple[int, int, int, int], ...]] = {
    Status.WAITING: FIGURE_BOXES_RUNNING,
    Status.RUNNING: FIGURE_BOXES_RUNNING,
    Status.JUMPING: FIGURE_BOXES_RUNNING,
    Status.DUCKING: FIGURE_BOXES_DUCKING,
    Status.CRASHED: FIGURE_BOXES_RUNNING,
}
assert set(_BOXES_BY_STATUS) == set(Status), "box table must cover every Status"

GROUNDED = (Status.WAITING, Status.RUNNING, Status.DUCKING)


@dataclass(frozen=True)
class Motion:
    """Vertical state fed through `integrate` (y is TOP-based, upward is negative)."""
    status: Status
    velocity: float
    y: float
    reached_min_height: bool = False
    speed_drop: bool = False


def _clamp_to_drop(velocity: float, reached_min_height: bool, cfg: FigureConfig) -> float:
    # Cut the ascent short: never rise faster than the drop velocity once min height is reached.
    if reached_min_height and velocity < cfg.drop_velocity:
        return cfg.drop_velocity
    return velocity


def integrate(motion: Motion, elapsed_ms: float, cfg: FigureConfig, ground_y: float) -> Motion:
    """Advance a jump by `elapsed_ms`, scaled to canonical 60 Hz frames.

    Anything but JUMPING is at rest and comes back untouched. A jump that
    crosses the ground line is clamped onto it with zero velocity and lands
    as RUNNING, or DUCKING when it was a speed drop (duck still held).
    """
    if motion.status is not Status.JUMPING:
        return motion

    frames = elapsed_ms / MS_PER_FRAME
    velocity = motion.velocity

    if motion.speed_drop:
        y = motion.y + velocity * cfg.speed_drop_coefficient * frames
    else:
        y = motion.y + velocity * frames
    velocity += cfg.gravity * frames

    reached = motion.reached_min_height or motion.speed_drop or y < ground_y - cfg.min_jump_height
    if y < cfg.max_jump_height or motion.speed_drop:
        velocity = _clamp_to_drop(velocity, reached, cfg)

    if y > ground_y:
        landed = Status.DUCKING if motion.speed_drop else Status.RUNNING
        return Motion(status=landed, velocity=0.0, y=ground_y)

    return replace(motion, velocity=velocity, y=y, reached_min_height=reached)


@dataclass
class Figure:
    """The player-controlled runner: fixed x, jumps and ducks in place."""
    config: FigureConfig
    ground_y: float
    x: float | None = None
    y: float | None = None
    velocity: float = 0.0
    status: Status = Status.WAITING
    jump_count: int = 0
    reached_min_height: bool = False
    speed_drop: bool = False

    def __post_init__(self):
        if self.x is None:
            self.x = float(self.config.start_x)
        if self.y is None:
            self.y = float(self.ground_y)

    # --- queries ---

    @property
    def jumping(self) -> bool:
        return self.status is Status.JUMPING

    @property
    def ducking(self) -> bool:
        return self.status is Status.DUCKING

    @property
    def grounded(self) -> bool:
        return self.status in GROUNDED

    @property
    def width(self) -> int:
        return self.config.width_duck if self.ducking else self.config.width

    @property
    def height(self) -> int:
        return self.config.height_duck if self.ducking else self.config.height

    @property
    def motion(self) -> Motion:
        return Motion(self.status, self.velocity, self.y, self.reached_min_height, self.speed_drop)

    def collision_boxes(self) -> List[pygame.Rect]:
        """World-space boxes for the current status (never empty)."""
        ox, oy = int(self.x), int(self.y)
        return [pygame.Rect(ox + bx, oy + by, bw, bh) for bx, by, bw, bh in _BOXES_BY_STATUS[self.status]]

    # --- actions ---

    def start_jump(self, speed: float) -> bool:
        """Take off from the ground. Ignored mid-air, while ducking or crashed."""
        if self.status not in (Status.WAITING, Status.RUNNING):
            return False
        self.status = Status.JUMPING
        self.velocity = self.config.initial_jump_velocity - speed / 10.0
        self.reached_min_height = False
        self.speed_drop = False
        self.jump_count += 1
        return True

    def end_jump(self):
        """Jump key released early: shorten the arc once min height is reached."""
        if self.jumping:
            self.velocity = _clamp_to_drop(self.velocity, self.reached_min_height, self.config)

    def set_speed_drop(self) -> bool:
        if not self.jumping:
            return False
        self.speed_drop = True
        self.velocity = 1.0
        return True

    def set_duck(self, is_ducking: bool) -> bool:
        """Duck or stand up. Only on the ground, so boxes never change mid-flight."""
        if is_ducking and self.status is Status.RUNNING:
            self.status = Status.DUCKING
            return True
        if not is_ducking and self.status is Status.DUCKING:
            self.status = Status.RUNNING
            return True
        return False

    def update(self, elapsed_ms: float):
        if not self.jumping:
            return
        m = integrate(self.motion, elapsed_ms, self.config, self.ground_y)
        self.status = m.status
        self.velocity = m.velocity
        self.y = m.y
        self.reached_min_height = m.reached_min_height
        self.speed_drop = m.speed_drop
        if not self.jumping:
            self.jump_count = 0

    def crash(self):
        self.status = Status.CRASHED

    def reset(self):
        self.y = float(self.ground_y)
        self.velocity = 0.0
        self.status = Status.RUNNING
        self.jump_count = 0
        self.reached_min_height = False
        self.speed_drop = False

    def apply_config(self, cfg: FigureConfig, ground_y: float | None = None):
        self.config = cfg
        if ground_y is not None:
            if self.grounded:
                self.y = float(ground_y)
            self.ground_y = float(ground_y)
        logger.debug("Figure reconfigured: jump_velocity=%s gravity=%s",
                     cfg.initial_jump_velocity, cfg.gravity)
