# src/runner/night_mode.py
from __future__ import annotations
import logging
from enum import Enum

from .config import RunnerConfig

logger = logging.getLogger(__name__)


class InvertState(Enum):
    NORMAL = "normal"
    INVERTED = "inverted"


class NightMode:
    """
    Day/night colour inversion. Purely cosmetic: the renderer reads
    `inverted`, physics and collision never do.

    Every `invert_distance` units of score flips to INVERTED, which fades
    back to NORMAL after `invert_fade_duration` ms.
    """
    def __init__(self, config: RunnerConfig):
        self.config = config
        self.state = InvertState.NORMAL
        self.timer = 0.0
        self._milestone = 0

    @property
    def inverted(self) -> bool:
        return self.state is InvertState.INVERTED

    def update(self, elapsed_ms: float, actual_distance: int) -> bool:
        """Advance the cycle; returns the current inverted flag."""
        if self.state is InvertState.INVERTED:
            if self.config.invert_distance > 0:
                self._milestone = max(self._milestone, actual_distance // self.config.invert_distance)
            self.timer += elapsed_ms
            if self.timer > self.config.invert_fade_duration:
                self.state = InvertState.NORMAL
                self.timer = 0.0
                logger.debug("night mode off")
        elif actual_distance > 0 and self.config.invert_distance > 0:
            milestone = actual_distance // self.config.invert_distance
            if milestone > self._milestone:
                self._milestone = milestone
                self.state = InvertState.INVERTED
                self.timer = 0.0
                logger.debug("night mode on at distance %d", actual_distance)
        return self.inverted

    def reset(self):
        self.state = InvertState.NORMAL
        self.timer = 0.0
        self._milestone = 0
