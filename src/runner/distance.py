# src/runner/distance.py
from __future__ import annotations
import math

from .config import DISTANCE_COEFFICIENT, ACHIEVEMENT_DISTANCE


class DistanceMeter:
    """Turns scrolled pixels into the displayed score and flags milestones."""

    def __init__(self, coefficient: float = DISTANCE_COEFFICIENT,
                 achievement_distance: int = ACHIEVEMENT_DISTANCE):
        self.coefficient = coefficient
        self.achievement_distance = achievement_distance
        self.score = 0
        self._milestone = 0

    def actual_distance(self, distance_ran: float) -> int:
        return round(math.ceil(distance_ran) * self.coefficient) if distance_ran else 0

    def update(self, distance_ran: float) -> bool:
        """Refresh the score; True when a new achievement milestone was crossed."""
        self.score = self.actual_distance(distance_ran)
        milestone = self.score // self.achievement_distance
        if milestone > self._milestone:
            self._milestone = milestone
            return True
        return False

    def reset(self):
        self.score = 0
        self._milestone = 0
