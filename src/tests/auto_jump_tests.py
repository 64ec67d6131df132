# src/tests/auto_jump_tests.py
"""
Auto-jump advisor: fires only for a near obstacle ahead of a figure on its feet.

Usage (from repo root):
  pytest src/tests/auto_jump_tests.py
"""
from __future__ import annotations

import pytest

from src.runner.auto_jump import advise
from src.runner.config import RunnerConfig, FigureConfig, Dimensions, ground_y
from src.runner.figure import Figure, Status
from src.runner.obstacles import Obstacle, ObstacleType

THRESHOLD = RunnerConfig().auto_jump_distance


class DummyFigure:
    def __init__(self, x: float = 50.0, jumping: bool = False, ducking: bool = False):
        self.x = x
        self.jumping = jumping
        self.ducking = ducking


class DummyObstacle:
    def __init__(self, x: float):
        self.x = x


@pytest.mark.parametrize("ahead, expected", [
    (80, True),
    (119, True),
    (120, False),   # threshold itself is excluded
    (150, False),
    (0, False),
    (-10, False),   # already level with or behind the figure
])
def test_distance_window(ahead, expected):
    fig = DummyFigure()
    assert advise(DummyObstacle(fig.x + ahead), fig, 6.0, THRESHOLD) is expected


def test_no_advice_while_airborne_or_ducking():
    assert not advise(DummyObstacle(130), DummyFigure(jumping=True), 6.0, THRESHOLD)
    assert not advise(DummyObstacle(130), DummyFigure(ducking=True), 6.0, THRESHOLD)


def test_no_advice_without_obstacle():
    assert not advise(None, DummyFigure(), 6.0, THRESHOLD)


def test_threshold_does_not_scale_with_speed():
    fig = DummyFigure()
    obstacle = DummyObstacle(fig.x + 100)
    assert advise(obstacle, fig, 6.0, THRESHOLD) == advise(obstacle, fig, 13.0, THRESHOLD)


def test_works_with_real_figure_and_obstacle():
    cfg = RunnerConfig()
    fig = Figure(FigureConfig.from_runner_config(cfg), ground_y(Dimensions(), cfg), status=Status.RUNNING)
    cactus = Obstacle(ObstacleType.CACTUS_SMALL, x=fig.x + 80, y=105)
    assert advise(cactus, fig, 6.0, THRESHOLD)
    fig.start_jump(6.0)
    assert not advise(cactus, fig, 6.0, THRESHOLD)
