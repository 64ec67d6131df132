# src/runner/config.py
from __future__ import annotations
from dataclasses import dataclass, fields, replace

# --- Display ---
WIDTH = 600
HEIGHT = 150
DEFAULT_WIDTH = 600
FPS = 60
MS_PER_FRAME = 1000.0 / FPS

# --- Runner defaults (per-frame units at 60 Hz) ---
ACCELERATION = 0.001
BG_CLOUD_SPEED = 0.2
BOTTOM_PAD = 10
CLEAR_TIME = 3000            # ms of obstacle-free warm-up after activation
CLOUD_FREQUENCY = 0.5
GAMEOVER_CLEAR_TIME = 750    # ms before a jump press may restart
GAP_COEFFICIENT = 0.6
GRAVITY = 0.6
INITIAL_JUMP_VELOCITY = 12
INVERT_FADE_DURATION = 12000
INVERT_DISTANCE = 700
MAX_CLOUDS = 6
MAX_OBSTACLE_DUPLICATION = 2
MAX_SPEED = 13
MIN_JUMP_HEIGHT = 35
MOBILE_SPEED_COEFFICIENT = 1.2
SPEED = 6
SPEED_DROP_COEFFICIENT = 3
AUTO_JUMP_DISTANCE = 120
AUTO_START_DELAY = 500       # ms idle before autoplay presses jump
COLLISION_TOLERANCE = 1      # px shaved off every side of a box

# --- Figure ---
FIGURE_START_X = 50
FIGURE_W = 44
FIGURE_H = 47
FIGURE_W_DUCK = 59
FIGURE_H_DUCK = 25
MAX_JUMP_HEIGHT = 30         # absolute y above which a jump is cut short

# (x, y, w, h) relative to the figure's top-left
FIGURE_BOXES_RUNNING = (
    (22, 0, 17, 16),
    (1, 18, 30, 9),
    (10, 35, 14, 8),
    (1, 24, 29, 5),
    (5, 30, 21, 4),
    (9, 34, 15, 4),
)
FIGURE_BOXES_DUCKING = (
    (1, 18, 55, 25),
)

# --- Obstacles ---
MAX_GAP_COEFFICIENT = 1.5

# --- Clouds ---
CLOUD_W = 46
CLOUD_H = 14
MIN_CLOUD_GAP = 100
MAX_CLOUD_GAP = 400
MAX_SKY_LEVEL = 30
MIN_SKY_LEVEL = 71

# --- Distance meter ---
DISTANCE_COEFFICIENT = 0.025
ACHIEVEMENT_DISTANCE = 100

SEED_DEFAULT = 12345

# --- Colors (RGB) ---
COLOR_BG = (247, 247, 247)
COLOR_FG = (83, 83, 83)
COLOR_CLOUD = (218, 218, 218)
COLOR_CACTUS = (83, 83, 83)
COLOR_BIRD = (120, 120, 120)
COLOR_DANGER = (214, 64, 64)
COLOR_DEBUG = (0, 160, 220)


@dataclass(frozen=True)
class Dimensions:
    width: int = WIDTH
    height: int = HEIGHT


@dataclass(frozen=True)
class RunnerConfig:
    """Immutable snapshot of the tunable game constants.

    Never patched in place: call `reconfigure` for a new snapshot and hand it
    to the runner, which propagates derived values to the figure and horizon.
    """
    acceleration: float = ACCELERATION
    bg_cloud_speed: float = BG_CLOUD_SPEED
    bottom_pad: int = BOTTOM_PAD
    clear_time: float = CLEAR_TIME
    cloud_frequency: float = CLOUD_FREQUENCY
    gameover_clear_time: float = GAMEOVER_CLEAR_TIME
    gap_coefficient: float = GAP_COEFFICIENT
    gravity: float = GRAVITY
    initial_jump_velocity: float = INITIAL_JUMP_VELOCITY
    invert_fade_duration: float = INVERT_FADE_DURATION
    invert_distance: int = INVERT_DISTANCE
    max_clouds: int = MAX_CLOUDS
    max_obstacle_duplication: int = MAX_OBSTACLE_DUPLICATION
    max_speed: float = MAX_SPEED
    min_jump_height: float = MIN_JUMP_HEIGHT
    mobile_speed_coefficient: float = MOBILE_SPEED_COEFFICIENT
    speed: float = SPEED
    speed_drop_coefficient: float = SPEED_DROP_COEFFICIENT
    auto_jump_distance: float = AUTO_JUMP_DISTANCE
    auto_start_delay: float = AUTO_START_DELAY
    collision_tolerance: int = COLLISION_TOLERANCE

    @classmethod
    def names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    def reconfigure(self, **changes) -> "RunnerConfig":
        unknown = set(changes) - set(self.names())
        if unknown:
            raise ValueError(f"Unknown config setting(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)


@dataclass(frozen=True)
class FigureConfig:
    """Per-figure physics derived from a RunnerConfig (upward is negative y)."""
    gravity: float
    min_jump_height: float
    max_jump_height: float
    speed_drop_coefficient: float
    initial_jump_velocity: float
    drop_velocity: float
    start_x: float = FIGURE_START_X
    width: int = FIGURE_W
    height: int = FIGURE_H
    width_duck: int = FIGURE_W_DUCK
    height_duck: int = FIGURE_H_DUCK

    @classmethod
    def from_runner_config(cls, cfg: RunnerConfig) -> "FigureConfig":
        return cls(
            gravity=float(cfg.gravity),
            min_jump_height=float(cfg.min_jump_height),
            max_jump_height=float(MAX_JUMP_HEIGHT),
            speed_drop_coefficient=float(cfg.speed_drop_coefficient),
            initial_jump_velocity=-float(cfg.initial_jump_velocity),
            drop_velocity=-float(cfg.initial_jump_velocity) / 2.0,
        )


def ground_y(dimensions: Dimensions, cfg: RunnerConfig) -> float:
    """Resting top-y of the figure on the ground line."""
    return float(dimensions.height - FIGURE_H - cfg.bottom_pad)
