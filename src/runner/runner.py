# src/runner/runner.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .auto_jump import advise
from .collision import check
from .config import MS_PER_FRAME, Dimensions, FigureConfig, RunnerConfig, ground_y
from .difficulty import initial_speed, next_speed
from .distance import DistanceMeter
from .figure import Figure, Status
from .horizon import Horizon
from .night_mode import NightMode
from .scheduler import ManualScheduler, MonotonicClock

logger = logging.getLogger(__name__)


class RunState(Enum):
    WAITING = "waiting"     # idle until the first jump
    INTRO = "intro"         # first jump seen, passes straight through to RUNNING
    RUNNING = "running"
    PAUSED = "paused"
    CRASHED = "crashed"


LIVE_STATES = (RunState.WAITING, RunState.INTRO, RunState.RUNNING)

StateListener = Callable[[RunState, RunState], None]


@dataclass
class Run:
    """Per-run counters. Replaced as a whole on restart."""
    current_speed: float
    running_time: float = 0.0   # ms since activation, paused time excluded
    distance_ran: float = 0.0   # px
    idle_time: float = 0.0      # ms spent WAITING


class Runner:
    """
    The simulation context: owns the figure, the horizon and the run state,
    and advances them once per scheduled tick.

    Collaborators are injected: a clock (`now()` in ms) and a frame scheduler
    (`request_frame` / `cancel`). One instance per session is the host's
    business; nothing here enforces it.
    """
    def __init__(self,
                 config: Optional[RunnerConfig] = None,
                 dimensions: Optional[Dimensions] = None,
                 clock=None,
                 scheduler=None,
                 rng: Optional[random.Random] = None,
                 seed: Optional[int] = None,
                 autoplay: bool = True):
        self.config = config or RunnerConfig()
        self.dimensions = dimensions or Dimensions()
        self.clock = clock or MonotonicClock()
        self.scheduler = scheduler or ManualScheduler()
        self.rng = rng or random.Random(seed)
        self.autoplay = autoplay

        self.figure = Figure(FigureConfig.from_runner_config(self.config),
                             ground_y(self.dimensions, self.config))
        self.horizon = Horizon(self.dimensions, self.config, self.rng)
        self.night_mode = NightMode(self.config)
        self.distance_meter = DistanceMeter()
        self.run = self._new_run()

        self.state = RunState.WAITING
        self.activated = False
        self.play_count = 0
        self.high_score = 0
        self.achievement = False

        self._started = False
        self._time: Optional[float] = None
        self._frame = None
        self._resume_state: Optional[RunState] = None
        self._crash_time: Optional[float] = None
        self._listeners: List[StateListener] = []

    # -------------------- Queries --------------------

    @property
    def current_speed(self) -> float:
        return self.run.current_speed

    @property
    def running_time(self) -> float:
        return self.run.running_time

    @property
    def distance_ran(self) -> float:
        return self.run.distance_ran

    @property
    def obstacles(self):
        return self.horizon.obstacles

    @property
    def crashed(self) -> bool:
        return self.state is RunState.CRASHED

    @property
    def paused(self) -> bool:
        return self.state is RunState.PAUSED

    @property
    def playing(self) -> bool:
        return self.state in LIVE_STATES and self._started

    @property
    def inverted(self) -> bool:
        return self.night_mode.inverted

    @property
    def score(self) -> int:
        return self.distance_meter.score

    @property
    def has_obstacles(self) -> bool:
        return self.activated and self.run.running_time > self.config.clear_time

    def is_running(self) -> bool:
        """True while a tick is scheduled."""
        return self._frame is not None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "score": self.score,
            "high_score": self.high_score,
            "speed": self.current_speed,
            "distance_px": self.distance_ran,
            "running_time_ms": self.running_time,
            "play_count": self.play_count,
            "inverted": self.inverted,
        }

    def add_listener(self, listener: StateListener):
        self._listeners.append(listener)

    # -------------------- Scheduling --------------------

    def start(self) -> bool:
        """Begin ticking in WAITING. Calling it again does nothing."""
        if self._started:
            return False
        self._started = True
        self._time = None
        self.figure.status = Status.WAITING
        self.schedule_next_update()
        logger.info("runner started (autoplay=%s)", self.autoplay)
        return True

    def schedule_next_update(self):
        if self._frame is None:
            self._frame = self.scheduler.request_frame(self._on_frame)

    def _on_frame(self):
        self._frame = None
        self.update()

    def _cancel_frame(self):
        self.scheduler.cancel(self._frame)
        self._frame = None

    # -------------------- Tick --------------------

    def update(self):
        """One tick: advance the world by the time since the previous tick."""
        now = self.clock.now()
        delta = 0.0 if self._time is None else max(0.0, now - self._time)
        self._time = now
        self.achievement = False

        if self.state not in LIVE_STATES:
            return

        if self.activated:
            self.run.running_time += delta
        else:
            self.run.idle_time += delta
            if self.autoplay and self.run.idle_time >= self.config.auto_start_delay:
                self.figure.start_jump(self.current_speed)

        has_obstacles = self.has_obstacles
        if self.autoplay and has_obstacles:
            self.check_auto_jump()

        self.figure.update(delta)

        # First jump triggers the intro.
        if self.state is RunState.WAITING and self.figure.jump_count >= 1:
            self._play_intro()

        world_delta = delta if self.activated else 0.0
        self.horizon.update(world_delta, self.current_speed, has_obstacles, self.inverted)

        if has_obstacles and check(self.figure.collision_boxes(), self.horizon.obstacles,
                                   self.config.collision_tolerance):
            self.game_over()
            return

        if self.activated:
            self.run.distance_ran += self.current_speed * delta / MS_PER_FRAME
            self.run.current_speed = next_speed(self.current_speed, delta, self.config)
            self.achievement = self.distance_meter.update(self.run.distance_ran)
            self.night_mode.update(delta, self.score)

        self.schedule_next_update()

    def check_auto_jump(self) -> bool:
        obstacle = self.horizon.nearest_obstacle()
        if advise(obstacle, self.figure, self.current_speed, self.config.auto_jump_distance):
            return self.figure.start_jump(self.current_speed)
        return False

    # -------------------- Transitions --------------------

    def _set_state(self, new_state: RunState):
        old = self.state
        if old is new_state:
            return
        self.state = new_state
        logger.info("state %s -> %s", old.value, new_state.value)
        for listener in list(self._listeners):
            listener(old, new_state)

    def _play_intro(self):
        self._set_state(RunState.INTRO)
        self.activated = True
        self.run.running_time = 0.0
        self.play_count += 1
        self._set_state(RunState.RUNNING)

    def game_over(self):
        self.figure.crash()
        self._cancel_frame()
        self._crash_time = self.clock.now()
        self.high_score = max(self.high_score, self.score)
        logger.info("crashed at score %d (speed %.2f)", self.score, self.current_speed)
        self._set_state(RunState.CRASHED)

    def stop(self) -> bool:
        """Pause a live run and drop any pending tick. Idempotent."""
        self._cancel_frame()
        if not self._started or self.state not in LIVE_STATES:
            return False
        self._resume_state = self.state
        self._set_state(RunState.PAUSED)
        return True

    def play(self) -> bool:
        """Resume from PAUSED. The clock is rebased so paused time never counts."""
        if self.state is not RunState.PAUSED:
            return False
        self._time = self.clock.now()
        self._set_state(self._resume_state or RunState.RUNNING)
        self._resume_state = None
        self.schedule_next_update()
        return True

    def on_visibility_change(self, visible: bool) -> bool:
        return self.play() if visible else self.stop()

    def restart(self) -> bool:
        """Fresh run after a crash; ticks resume without a new jump."""
        if self.state is not RunState.CRASHED:
            return False
        self.play_count += 1
        self.run = self._new_run()
        self.horizon.reset()
        self.figure.reset()
        self.night_mode.reset()
        self.distance_meter.reset()
        self._time = self.clock.now()
        self._crash_time = None
        self._cancel_frame()
        self._set_state(RunState.RUNNING)
        self.schedule_next_update()
        logger.info("restart #%d", self.play_count)
        return True

    # -------------------- Input intents --------------------

    def on_jump_pressed(self) -> bool:
        if self.state is RunState.CRASHED:
            if self.clock.now() - (self._crash_time or 0.0) >= self.config.gameover_clear_time:
                return self.restart()
            return False
        if self.state not in LIVE_STATES:
            return False
        return self.figure.start_jump(self.current_speed)

    def on_jump_released(self):
        if self.state in LIVE_STATES:
            self.figure.end_jump()

    def on_duck_pressed(self) -> bool:
        if self.state not in LIVE_STATES:
            return False
        if self.figure.jumping:
            return self.figure.set_speed_drop()
        return self.figure.set_duck(True)

    def on_duck_released(self) -> bool:
        if self.state not in LIVE_STATES:
            return False
        self.figure.speed_drop = False
        return self.figure.set_duck(False)

    # -------------------- Configuration --------------------

    def _new_run(self) -> Run:
        return Run(current_speed=initial_speed(self.config.speed, self.dimensions.width, self.config))

    def set_speed(self, speed: Optional[float] = None):
        base = self.current_speed if speed is None else speed
        self.run.current_speed = initial_speed(base, self.dimensions.width, self.config)

    def reconfigure(self, **changes) -> RunnerConfig:
        """Swap in a new config snapshot and push derived values to dependents."""
        self.config = self.config.reconfigure(**changes)
        self.figure.apply_config(FigureConfig.from_runner_config(self.config),
                                 ground_y(self.dimensions, self.config))
        self.horizon.apply_config(self.config)
        self.night_mode.config = self.config
        if "speed" in changes:
            self.set_speed(self.config.speed)
        logger.debug("reconfigured: %s", changes)
        return self.config

    def update_config_setting(self, setting: str, value) -> bool:
        """Single debug entry point, e.g. update_config_setting("GRAVITY", 0.4)."""
        name = setting.lower()
        if value is None or name not in RunnerConfig.names():
            logger.warning("ignoring config setting %r=%r", setting, value)
            return False
        self.reconfigure(**{name: value})
        return True
