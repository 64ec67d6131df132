# src/runner/collision.py
from __future__ import annotations
from typing import Iterable, Optional, Sequence, Tuple

import pygame

from .obstacles import Obstacle


def shrink(box: pygame.Rect, tolerance: int) -> pygame.Rect:
    """Pull every side of `box` in by `tolerance` px (center preserved)."""
    return box.inflate(-2 * tolerance, -2 * tolerance)


def boxes_collide(a: pygame.Rect, b: pygame.Rect, tolerance: int = 0) -> bool:
    """Strict overlap of the shrunk boxes; shared edges do not count."""
    return shrink(a, tolerance).colliderect(shrink(b, tolerance))


def _bounds(boxes: Sequence[pygame.Rect]) -> pygame.Rect:
    return boxes[0].unionall(boxes[1:])


def find_collision(figure_boxes: Sequence[pygame.Rect],
                   obstacles: Iterable[Obstacle],
                   tolerance: int = 0) -> Optional[Tuple[pygame.Rect, pygame.Rect]]:
    """
    First (figure_box, obstacle_box) pair that overlaps, or None.

    Obstacles come in spawn order (nearest first): anything wholly behind the
    figure is skipped and the scan stops at the first one starting past the
    figure's right edge.
    """
    if not figure_boxes:
        return None
    outer = _bounds(figure_boxes)

    for obstacle in obstacles:
        r = obstacle.rect
        if r.left >= outer.right:
            break
        if r.right <= outer.left:
            continue
        if not boxes_collide(outer, r, tolerance):
            continue
        for fb in figure_boxes:
            for ob in obstacle.collision_boxes():
                if boxes_collide(fb, ob, tolerance):
                    return fb, ob
    return None


def check(figure_boxes: Sequence[pygame.Rect], obstacles: Iterable[Obstacle], tolerance: int = 0) -> bool:
    return find_collision(figure_boxes, obstacles, tolerance) is not None
