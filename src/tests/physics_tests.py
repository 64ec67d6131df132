# src/tests/physics_tests.py
"""
Figure physics: resting state, jump arcs, ducking and speed drop.

Usage (from repo root):
  pytest src/tests/physics_tests.py
  python -m src.tests.physics_tests
"""
from __future__ import annotations

import pytest

from src.runner.config import RunnerConfig, FigureConfig, Dimensions, ground_y, MS_PER_FRAME
from src.runner.figure import Figure, Motion, Status, integrate

CFG = RunnerConfig()
FCFG = FigureConfig.from_runner_config(CFG)
GY = ground_y(Dimensions(), CFG)


def make_figure(status: Status = Status.RUNNING) -> Figure:
    return Figure(FCFG, GY, status=status)


def fly_until_landed(fig: Figure, step_ms: float, limit: int = 10_000) -> tuple:
    """Integrate until grounded. Returns (ticks, highest point reached)."""
    top = fig.y
    for ticks in range(1, limit + 1):
        fig.update(step_ms)
        top = min(top, fig.y)
        if not fig.jumping:
            return ticks, top
    raise AssertionError("figure never landed")


def test_rest_is_idempotent():
    fig = make_figure()
    for _ in range(120):
        fig.update(MS_PER_FRAME)
    assert fig.y == GY and fig.velocity == 0.0
    assert fig.status is Status.RUNNING

    m = Motion(Status.RUNNING, 0.0, GY)
    assert integrate(m, 250.0, FCFG, GY) == m


@pytest.mark.parametrize("step_ms", [5.0, 8.0, MS_PER_FRAME, 25.0, 33.3, 50.0])
def test_jump_returns_to_ground_at_any_step(step_ms):
    fig = make_figure()
    assert fig.start_jump(speed=6)
    _, top = fly_until_landed(fig, step_ms)

    assert top < GY - CFG.min_jump_height, "jump never reached min height"
    assert fig.y == pytest.approx(GY)
    assert fig.velocity == 0.0
    assert fig.status is Status.RUNNING
    assert fig.jump_count == 0


def test_jump_height_is_frame_rate_independent():
    tops = []
    for step_ms in (4.0, MS_PER_FRAME / 2, MS_PER_FRAME):
        fig = make_figure()
        fig.start_jump(speed=6)
        tops.append(fly_until_landed(fig, step_ms)[1])
    # Euler error shrinks with the step; all apexes stay within a few px
    assert max(tops) - min(tops) < 10.0


def test_zero_delta_jump_stays_airborne():
    fig = make_figure()
    fig.start_jump(speed=6)
    fig.update(0.0)
    assert fig.jumping and fig.y == GY


def test_no_double_jump():
    fig = make_figure()
    assert fig.start_jump(speed=6)
    fig.update(MS_PER_FRAME)
    v = fig.velocity
    assert not fig.start_jump(speed=6)
    assert fig.velocity == v
    assert fig.jump_count == 1


def test_jump_velocity_grows_with_speed():
    slow, fast = make_figure(), make_figure()
    slow.start_jump(speed=6)
    fast.start_jump(speed=13)
    assert fast.velocity < slow.velocity < 0


def test_jump_ignored_while_ducking():
    fig = make_figure()
    assert fig.set_duck(True)
    assert not fig.start_jump(speed=6)
    assert fig.status is Status.DUCKING


def test_duck_rejected_while_airborne():
    fig = make_figure()
    fig.start_jump(speed=6)
    fig.update(MS_PER_FRAME)
    assert not fig.set_duck(True)
    assert fig.status is Status.JUMPING
    assert len(fig.collision_boxes()) == 6


def test_duck_swaps_to_flat_wide_box():
    fig = make_figure()
    standing = fig.collision_boxes()
    fig.set_duck(True)
    ducked = fig.collision_boxes()
    assert len(ducked) == 1
    assert ducked[0].width > max(b.width for b in standing)
    assert ducked[0].top > min(b.top for b in standing)
    assert fig.set_duck(False)
    assert len(fig.collision_boxes()) == 6


def test_boxes_never_empty_for_any_status():
    fig = make_figure()
    for status in Status:
        fig.status = status
        assert fig.collision_boxes(), f"no boxes for {status}"


def test_speed_drop_lands_sooner_and_ducking():
    normal, dropped = make_figure(), make_figure()
    for fig in (normal, dropped):
        fig.start_jump(speed=6)
        for _ in range(5):
            fig.update(MS_PER_FRAME)

    assert dropped.set_speed_drop()
    t_normal, _ = fly_until_landed(normal, MS_PER_FRAME)
    t_dropped, _ = fly_until_landed(dropped, MS_PER_FRAME)

    assert t_dropped < t_normal
    assert dropped.status is Status.DUCKING
    assert dropped.y == GY and not dropped.speed_drop


def test_speed_drop_rejected_on_ground():
    fig = make_figure()
    assert not fig.set_speed_drop()
    assert not fig.speed_drop


def test_early_release_shortens_jump():
    held, released = make_figure(), make_figure()
    for fig in (held, released):
        fig.start_jump(speed=6)
        for _ in range(3):
            fig.update(MS_PER_FRAME)
    assert released.reached_min_height

    released.end_jump()
    assert released.velocity == FCFG.drop_velocity

    _, top_held = fly_until_landed(held, MS_PER_FRAME)
    _, top_released = fly_until_landed(released, MS_PER_FRAME)
    assert top_released > top_held   # y grows downward


def test_apply_config_rearms_jump():
    fig = make_figure()
    new_cfg = CFG.reconfigure(initial_jump_velocity=15, gravity=0.4)
    fig.apply_config(FigureConfig.from_runner_config(new_cfg))
    fig.start_jump(speed=0)
    assert fig.velocity == -15
    assert fig.config.drop_velocity == -7.5
    assert fig.config.gravity == 0.4


def main():
    raise SystemExit(pytest.main([__file__, "-q"]))


if __name__ == "__main__":
    main()
