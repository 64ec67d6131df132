# src/env/observations.py
from __future__ import annotations
from typing import List

import numpy as np

N_OBSTACLES = 2          # nearest obstacles ahead of the figure
MAX_VY = 20.0            # px/frame used to scale vertical velocity
OBS_SIZE = 5 + 4 * N_OBSTACLES

OBS_LOW = np.array([0.0, -1.0, 0.0, 0.0, 0.0] + [0.0, 0.0, 0.0, 0.0] * N_OBSTACLES, dtype=np.float32)
OBS_HIGH = np.ones(OBS_SIZE, dtype=np.float32)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def build_observation(runner) -> np.ndarray:
    """
    Returns a fixed (13,) float32 vector:
      [ y_norm, vy_norm, jumping, ducking, speed_norm,
        dist@0, y@0, w@0, h@0,
        dist@1, y@1, w@1, h@1 ]
    - y_norm: figure top y over its ground y, clamped to [0,1] (1 = on the ground)
    - vy_norm in [-1,1] (negative = rising)
    - dist: (obstacle.x - figure.x) / width, clamped; sentinel 1.0 when absent
    - y/w/h: obstacle geometry over the display size; 0.0 when absent
    """
    fig = runner.figure
    dims = runner.dimensions

    y_norm = _clamp01(fig.y / max(1.0, fig.ground_y))
    vy_norm = max(-1.0, min(1.0, fig.velocity / MAX_VY))
    speed_norm = _clamp01(runner.current_speed / max(1e-6, runner.config.max_speed))

    feats: List[float] = [y_norm, vy_norm, float(fig.jumping), float(fig.ducking), speed_norm]

    ahead = [o for o in runner.obstacles if o.right > fig.x][:N_OBSTACLES]
    for i in range(N_OBSTACLES):
        if i < len(ahead):
            o = ahead[i]
            feats.extend([
                _clamp01((o.x - fig.x) / dims.width),
                _clamp01(o.y / dims.height),
                _clamp01(o.width / dims.width),
                _clamp01(o.height / dims.height),
            ])
        else:
            feats.extend([1.0, 0.0, 0.0, 0.0])

    return np.asarray(feats, dtype=np.float32)
