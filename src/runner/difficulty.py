# src/runner/difficulty.py
from __future__ import annotations

from .config import DEFAULT_WIDTH, MS_PER_FRAME, RunnerConfig


def next_speed(current: float, elapsed_ms: float, config: RunnerConfig) -> float:
    """Accelerate toward max_speed, scaled by elapsed time like the jump physics."""
    if current >= config.max_speed:
        return current
    return min(config.max_speed, current + config.acceleration * elapsed_ms / MS_PER_FRAME)


def initial_speed(speed: float, viewport_width: int, config: RunnerConfig) -> float:
    """Start slower on narrow screens, but never faster than `speed`."""
    if viewport_width < DEFAULT_WIDTH:
        mobile = speed * viewport_width / DEFAULT_WIDTH * config.mobile_speed_coefficient
        return min(mobile, speed)
    return speed
