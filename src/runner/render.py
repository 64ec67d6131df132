# src/runner/render.py
from __future__ import annotations
from typing import Dict, Tuple

import pygame

from .collision import find_collision
from .config import (
    COLOR_BG, COLOR_FG, COLOR_CLOUD, COLOR_CACTUS, COLOR_BIRD, COLOR_DANGER, COLOR_DEBUG
)
from .figure import Status
from .obstacles import ObstacleType
from .runner import Runner, RunState

Color = Tuple[int, int, int]

_OBSTACLE_COLORS: Dict[ObstacleType, Color] = {
    ObstacleType.CACTUS_SMALL: COLOR_CACTUS,
    ObstacleType.CACTUS_LARGE: COLOR_CACTUS,
    ObstacleType.PTERODACTYL: COLOR_BIRD,
}
assert set(_OBSTACLE_COLORS) == set(ObstacleType)

_FIGURE_COLORS: Dict[Status, Color] = {
    Status.WAITING: COLOR_FG,
    Status.RUNNING: COLOR_FG,
    Status.JUMPING: COLOR_FG,
    Status.DUCKING: COLOR_FG,
    Status.CRASHED: COLOR_DANGER,
}
assert set(_FIGURE_COLORS) == set(Status)


def _invert(c: Color) -> Color:
    return (255 - c[0], 255 - c[1], 255 - c[2])


class RunnerRenderer:
    """Draws a Runner from geometry only (boxes, rects, offsets), never pixels."""

    def __init__(self, surface: pygame.Surface, debug_boxes: bool = False):
        self.surface = surface
        self.debug_boxes = debug_boxes
        pygame.font.init()
        self.font = pygame.font.SysFont("jetbrainsmono", 14)

    def _c(self, color: Color, inverted: bool) -> Color:
        return _invert(color) if inverted else color

    def draw(self, runner: Runner):
        inv = runner.inverted
        surf = self.surface
        w, h = runner.dimensions.width, runner.dimensions.height
        surf.fill(self._c(COLOR_BG, inv))

        # Ground line with scrolling dashes
        gy = h - runner.config.bottom_pad - 1
        fg = self._c(COLOR_FG, inv)
        pygame.draw.line(surf, fg, (0, gy), (w, gy), 1)
        off = int(runner.horizon.ground_offset)
        for x in range(-off % 40, w, 40):
            pygame.draw.line(surf, fg, (x, gy + 3), (x + 6, gy + 3), 1)

        for cloud in runner.horizon.clouds:
            pygame.draw.ellipse(surf, self._c(COLOR_CLOUD, inv), cloud.rect, 1)

        for obstacle in runner.obstacles:
            color = self._c(_OBSTACLE_COLORS[obstacle.type], inv)
            for box in obstacle.collision_boxes():
                pygame.draw.rect(surf, color, box)

        fig = runner.figure
        color = self._c(_FIGURE_COLORS[fig.status], inv)
        for box in fig.collision_boxes():
            pygame.draw.rect(surf, color, box)

        if self.debug_boxes:
            for box in fig.collision_boxes():
                pygame.draw.rect(surf, COLOR_DEBUG, box, 1)
            for obstacle in runner.obstacles:
                pygame.draw.rect(surf, COLOR_DEBUG, obstacle.rect, 1)
            hit = find_collision(fig.collision_boxes(), runner.obstacles, runner.config.collision_tolerance)
            if hit is not None:
                for box in hit:
                    pygame.draw.rect(surf, COLOR_DANGER, box, 1)

        self._draw_hud(runner, fg)

    def _draw_hud(self, runner: Runner, fg: Color):
        w, h = runner.dimensions.width, runner.dimensions.height
        hud = f"HI {runner.high_score:05d}  {runner.score:05d}"
        txt = self.font.render(hud, True, fg)
        self.surface.blit(txt, (w - txt.get_width() - 8, 6))

        msg = None
        if runner.state is RunState.CRASHED:
            msg = "G A M E   O V E R"
        elif runner.state is RunState.PAUSED:
            msg = "PAUSED"
        elif runner.state is RunState.WAITING:
            msg = "SPACE to start"
        if msg:
            t = self.font.render(msg, True, fg)
            self.surface.blit(t, ((w - t.get_width()) // 2, h // 3))
