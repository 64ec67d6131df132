# src/env/runner_env.py
from __future__ import annotations
from typing import Optional, Dict, Any

import numpy as np
import gymnasium as gym
import pygame

from src.runner.config import FPS, MS_PER_FRAME, RunnerConfig, Dimensions
from src.runner.render import RunnerRenderer
from src.runner.runner import Runner
from src.runner.scheduler import ManualClock, ManualScheduler
from src.env.observations import build_observation, OBS_LOW, OBS_HIGH

NOOP, JUMP, DUCK = 0, 1, 2


class RunnerEnv(gym.Env):
    """
    Dino Runner Gymnasium environment (vector observations).
    - Simulation at 60 Hz on a manual clock, one runner tick per sub-step.
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Actions: 0 = NOOP, 1 = JUMP, 2 = DUCK (held for the decision step).
    - Observation: shape (13,), float32.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 30.0,
                 config: Optional[RunnerConfig] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = config or RunnerConfig()
        self.dimensions = Dimensions()
        self.dt_ms = MS_PER_FRAME

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        self.action_space = gym.spaces.Discrete(3)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.runner: Optional[Runner] = None
        self.clock: Optional[ManualClock] = None
        self.scheduler: Optional[ManualScheduler] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.surface = None
        self.renderer = None
        self.frame_clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # An explicit seed drives the obstacle RNG directly; otherwise draw one from np_random.
        if seed is not None:
            run_seed = int(seed)
        else:
            run_seed = int(self.np_random.integers(0, 2**31 - 1))

        self.clock = ManualClock()
        self.scheduler = ManualScheduler()
        self.runner = Runner(
            config=self.config,
            dimensions=self.dimensions,
            clock=self.clock,
            scheduler=self.scheduler,
            seed=run_seed,
            autoplay=False,
        )
        self.runner.start()
        self.runner.on_jump_pressed()
        self.scheduler.run_pending()   # first tick: zero delta, intro -> RUNNING

        self.timestep = 0
        self.current_seed = run_seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, **self.runner.snapshot()}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.runner is not None, "call reset() first"
        runner = self.runner

        # Finished episode: the world stays frozen until reset().
        if runner.crashed:
            info = {"seed": self.current_seed, "timestep": self.timestep, **runner.snapshot()}
            return self._get_obs(), 0.0, True, False, info

        # Stand up first, a duck held from the last step would block a jump.
        if action != DUCK and (runner.figure.ducking or runner.figure.speed_drop):
            runner.on_duck_released()
        if action == JUMP:
            runner.on_jump_pressed()
        elif action == DUCK:
            runner.on_duck_pressed()

        for _ in range(self.frame_skip):
            self.clock.advance(self.dt_ms)
            self.scheduler.run_pending()
            if runner.crashed:
                break

        reward = -1.0 if runner.crashed else 1.0

        self.timestep += 1
        terminated = runner.crashed
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {"seed": self.current_seed, "timestep": self.timestep, **runner.snapshot()}

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.runner is not None
        return build_observation(self.runner)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.runner is None:
            return None

        w, h = self.dimensions.width, self.dimensions.height
        if self.render_mode == "human":
            if self.screen is None:
                pygame.init()
                self.screen = pygame.display.set_mode((w, h))
                pygame.display.set_caption("Dino Runner - Gym Env")
                self.frame_clock = pygame.time.Clock()
                self.renderer = RunnerRenderer(self.screen)
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()
            self.renderer.draw(self.runner)
            pygame.display.flip()
            self.frame_clock.tick(self.metadata["render_fps"])
            return None

        if self.surface is None:
            self.surface = pygame.Surface((w, h))
            self.renderer = RunnerRenderer(self.surface)
        self.renderer.draw(self.runner)
        # (W, H, 3) -> (H, W, 3) uint8
        return np.transpose(pygame.surfarray.array3d(self.surface), (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
        self.screen = None
        self.surface = None
        self.renderer = None
        self.frame_clock = None
