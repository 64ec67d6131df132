# src/runner/auto_jump.py
from __future__ import annotations


def advise(nearest_obstacle, figure, current_speed: float, threshold: float) -> bool:
    """
    Should the figure jump now?

    Yes when an obstacle sits strictly between 0 and `threshold` px ahead of
    the figure's x and the figure is on its feet (not jumping, not ducking).
    `current_speed` does not scale the threshold.
    """
    if nearest_obstacle is None:
        return False
    distance = nearest_obstacle.x - figure.x
    return 0 < distance < threshold and not figure.jumping and not figure.ducking
