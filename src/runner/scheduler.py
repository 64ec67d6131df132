# src/runner/scheduler.py
from __future__ import annotations
import itertools
import time
from typing import Callable, Dict, Optional

import pygame

FrameCallback = Callable[[], None]


# --- Clocks (milliseconds) ---

class MonotonicClock:
    def now(self) -> float:
        return time.perf_counter() * 1000.0


class ManualClock:
    """Clock that only moves when told to; headless env and tests."""

    def __init__(self, start_ms: float = 0.0):
        self._now = float(start_ms)

    def now(self) -> float:
        return self._now

    def advance(self, ms: float) -> float:
        self._now += float(ms)
        return self._now

    def set(self, ms: float):
        self._now = float(ms)


# --- Frame schedulers ---

class ManualScheduler:
    """
    requestAnimationFrame-style queue. `request_frame` hands back a handle,
    `cancel` forgets it, `run_pending` fires whatever was queued before the call
    (callbacks queued while firing wait for the next round).
    """
    def __init__(self):
        self._ids = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: Optional[int]):
        if handle is not None:
            self._pending.pop(handle, None)

    def has_pending(self) -> bool:
        return bool(self._pending)

    def run_pending(self) -> int:
        batch = list(self._pending.items())
        fired = 0
        for handle, callback in batch:
            # A callback earlier in the batch may have cancelled this one.
            if self._pending.pop(handle, None) is None:
                continue
            callback()
            fired += 1
        return fired


class PygameFrameScheduler(ManualScheduler):
    """Frame queue paced by pygame.time.Clock for the playable window."""

    def __init__(self, fps: int = 60):
        super().__init__()
        self.fps = fps
        self.clock = pygame.time.Clock()
        self.running = False

    def run(self, on_events: Callable[[], None], on_frame: Callable[[], None]):
        """Loop until `stop_loop`: pump input, fire queued ticks, draw."""
        self.running = True
        while self.running:
            self.clock.tick(self.fps)
            on_events()
            if not self.running:
                break
            self.run_pending()
            on_frame()

    def stop_loop(self):
        self.running = False
