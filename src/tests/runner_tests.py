# src/tests/runner_tests.py
"""
Runner tick loop and run-state machine on a manual clock and scheduler.

Usage (from repo root):
  pytest src/tests/runner_tests.py
"""
from __future__ import annotations

import pytest

from src.runner.config import MS_PER_FRAME, Dimensions, RunnerConfig
from src.runner.figure import Status
from src.runner.obstacles import Obstacle, ObstacleType
from src.runner.runner import Runner, RunState
from src.runner.scheduler import ManualClock, ManualScheduler


def make_runner(seed: int = 7, autoplay: bool = False, **kwargs) -> Runner:
    return Runner(clock=ManualClock(), scheduler=ManualScheduler(), seed=seed, autoplay=autoplay, **kwargs)


def tick(runner: Runner, n: int = 1, ms: float = MS_PER_FRAME) -> int:
    fired = 0
    for _ in range(n):
        runner.clock.advance(ms)
        fired += runner.scheduler.run_pending()
    return fired


def started(**kwargs) -> Runner:
    """A runner past the intro, figure back on the ground."""
    runner = make_runner(**kwargs)
    runner.start()
    runner.on_jump_pressed()
    runner.scheduler.run_pending()
    tick(runner, 60)
    assert runner.state is RunState.RUNNING and not runner.figure.jumping
    return runner


def force_crash(runner: Runner):
    runner.run.running_time = runner.config.clear_time + 1
    runner.figure.reset()
    runner.horizon.obstacles = [Obstacle(ObstacleType.CACTUS_LARGE, x=runner.figure.x, y=90)]
    tick(runner)
    assert runner.crashed


# ---- startup ----

def test_start_is_idempotent():
    runner = make_runner()
    assert runner.start()
    assert not runner.start()
    assert runner.scheduler.run_pending() == 1
    assert runner.figure.status is Status.WAITING


def test_first_tick_has_zero_delta():
    runner = make_runner()
    runner.clock.set(5000.0)
    runner.start()
    runner.on_jump_pressed()
    runner.scheduler.run_pending()
    assert runner.figure.y == runner.figure.ground_y
    assert runner.running_time == 0.0
    assert runner.distance_ran == 0.0


def test_first_jump_passes_through_intro():
    runner = make_runner()
    transitions = []
    runner.add_listener(lambda old, new: transitions.append((old, new)))
    runner.start()
    runner.on_jump_pressed()
    runner.scheduler.run_pending()
    assert transitions == [(RunState.WAITING, RunState.INTRO), (RunState.INTRO, RunState.RUNNING)]
    assert runner.activated and runner.play_count == 1


def test_world_is_frozen_while_waiting():
    runner = make_runner()
    runner.start()
    tick(runner, 100)
    assert runner.state is RunState.WAITING
    assert runner.horizon.ground_offset == 0.0
    assert runner.running_time == 0.0 and runner.current_speed == runner.config.speed


def test_autoplay_starts_after_idle_delay():
    runner = make_runner(autoplay=True)
    runner.start()
    frames = int(runner.config.auto_start_delay / MS_PER_FRAME) + 2
    tick(runner, frames)
    assert runner.state is RunState.RUNNING
    assert runner.play_count == 1


def test_narrow_viewport_starts_slower():
    runner = make_runner(dimensions=Dimensions(300, 150))
    assert runner.current_speed == pytest.approx(3.6)


# ---- running ----

def test_speed_rises_monotonically_to_cap():
    runner = started(config=RunnerConfig(clear_time=10**9))
    speeds = []
    for _ in range(8000):
        tick(runner)
        speeds.append(runner.current_speed)
    assert all(a <= b for a, b in zip(speeds, speeds[1:]))
    assert speeds[-1] == runner.config.max_speed
    assert runner.obstacles == []
    assert runner.score > 0


def test_no_obstacles_until_clear_time():
    runner = started()
    frames = int((runner.config.clear_time - runner.running_time) / MS_PER_FRAME) - 1
    tick(runner, frames)
    assert runner.obstacles == []
    tick(runner, 3)
    assert runner.obstacles


def test_auto_jump_runs_before_physics():
    runner = started(autoplay=True)
    runner.run.running_time = runner.config.clear_time + 1
    runner.horizon.obstacles = [Obstacle(ObstacleType.CACTUS_SMALL, x=runner.figure.x + 100, y=105)]
    tick(runner)
    assert runner.figure.jumping
    assert runner.figure.y < runner.figure.ground_y


def test_duck_intents():
    runner = started()
    assert runner.on_duck_pressed()
    assert runner.figure.status is Status.DUCKING
    assert runner.on_duck_released()
    assert runner.figure.status is Status.RUNNING

    runner.on_jump_pressed()
    tick(runner, 2)
    assert runner.on_duck_pressed()
    assert runner.figure.speed_drop
    runner.on_duck_released()
    assert not runner.figure.speed_drop


# ---- pause / resume ----

def test_paused_time_is_not_counted():
    runner = started()
    before = runner.running_time
    offset = runner.horizon.ground_offset

    assert runner.stop()
    assert runner.paused and not runner.is_running()
    runner.clock.advance(60_000)
    assert runner.scheduler.run_pending() == 0

    assert runner.play()
    tick(runner)
    assert runner.running_time == pytest.approx(before + MS_PER_FRAME)
    step = runner.current_speed
    assert (runner.horizon.ground_offset - offset) % runner.dimensions.width == pytest.approx(step, abs=0.01)


def test_stop_before_start_is_a_noop():
    runner = make_runner()
    assert not runner.stop()
    assert runner.state is RunState.WAITING
    assert not runner.play()
    assert not runner.scheduler.has_pending()

    assert runner.start()
    assert runner.figure.status is Status.WAITING
    assert runner.scheduler.run_pending() == 1


def test_stop_and_play_are_idempotent():
    runner = started()
    assert runner.stop()
    assert not runner.stop()
    assert runner.play()
    assert not runner.play()
    assert runner.scheduler.run_pending() == 1


def test_visibility_change_pauses_and_resumes():
    runner = started()
    assert runner.on_visibility_change(False)
    assert runner.paused
    assert runner.on_visibility_change(True)
    assert runner.state is RunState.RUNNING and runner.is_running()


# ---- crash / restart ----

def test_crash_stops_the_world():
    runner = started()
    force_crash(runner)
    assert runner.figure.status is Status.CRASHED
    assert not runner.is_running()
    xs = [o.x for o in runner.obstacles]

    assert tick(runner, 30) == 0
    assert [o.x for o in runner.obstacles] == xs
    assert runner.high_score == runner.score


def test_restart_after_crash():
    runner = started()
    force_crash(runner)
    plays = runner.play_count

    assert runner.restart()
    assert runner.state is RunState.RUNNING
    assert runner.current_speed == runner.config.speed
    assert runner.obstacles == [] and runner.score == 0 and not runner.inverted
    assert runner.figure.status is Status.RUNNING
    assert runner.play_count == plays + 1

    tick(runner)
    assert runner.running_time == pytest.approx(MS_PER_FRAME)
    assert runner.is_running()


def test_restart_only_from_crashed():
    runner = started()
    assert not runner.restart()


def test_jump_restarts_only_after_gameover_clear_time():
    runner = started()
    force_crash(runner)
    assert not runner.on_jump_pressed()
    assert runner.crashed
    runner.clock.advance(runner.config.gameover_clear_time)
    assert runner.on_jump_pressed()
    assert runner.state is RunState.RUNNING


def test_restart_leaves_a_single_pending_tick():
    runner = started()
    force_crash(runner)
    runner.restart()
    assert runner.scheduler.run_pending() == 1


# ---- configuration ----

def test_update_config_setting_propagates():
    runner = started()
    original = runner.config

    assert runner.update_config_setting("INITIAL_JUMP_VELOCITY", 15)
    assert runner.config.initial_jump_velocity == 15
    assert runner.figure.config.initial_jump_velocity == -15
    assert original.initial_jump_velocity == RunnerConfig().initial_jump_velocity

    assert runner.update_config_setting("GAP_COEFFICIENT", 0.9)
    assert runner.horizon.generator.config.gap_coefficient == 0.9

    assert runner.update_config_setting("INVERT_DISTANCE", 50)
    assert runner.night_mode.config.invert_distance == 50

    assert runner.update_config_setting("SPEED", 8)
    assert runner.current_speed == 8


def test_update_config_setting_rejects_unknown_or_missing():
    runner = make_runner()
    before = runner.config
    assert not runner.update_config_setting("NOT_A_SETTING", 1)
    assert not runner.update_config_setting("GRAVITY", None)
    assert runner.config is before
    with pytest.raises(ValueError):
        runner.reconfigure(not_a_setting=1)


# ---- determinism ----

def test_same_seed_same_run():
    def play(seed):
        runner = make_runner(seed=seed, autoplay=True)
        runner.start()
        tick(runner, 3000)
        return runner.snapshot(), [(o.type, o.x, o.size) for o in runner.obstacles]

    assert play(11) == play(11)
