from __future__ import annotations

import pytest

from falling_blocks.game import GameTimer, GameTimers


@pytest.mark.parametrize("duration", [0, -1.0, float("nan")])
def test_rejects_non_positive_duration(duration):
    with pytest.raises(ValueError):
        GameTimer(duration)


def test_fires_once_when_threshold_crossed():
    timer = GameTimer(1.0)
    assert timer.tick(0.4) is False
    assert timer.tick(0.4) is False
    assert timer.progress() == pytest.approx(0.8)
    assert timer.tick(0.4) is True
    assert timer.elapsed == 0.0
    assert timer.progress() == 0.0
    assert timer.tick(0.5) is False


def test_pause_keeps_accumulated_progress():
    timer = GameTimer(1.0)
    timer.tick(0.6)
    timer.pause()
    assert timer.tick(5.0) is False
    assert timer.progress() == pytest.approx(0.6)
    timer.resume()
    assert timer.tick(0.3) is False
    assert timer.tick(0.2) is True


def test_progress_is_clamped():
    timer = GameTimer(0.5)
    timer.elapsed = 3.0
    assert timer.progress() == 1.0
    timer.elapsed = -1.0
    assert timer.progress() == 0.0


def test_game_timers_act_on_every_timer():
    timers = GameTimers(1.0, 0.5, 0.15, 0.15, 2.0)
    for timer in timers.all():
        timer.tick(0.1)
    timers.pause_all()
    assert all(timer.paused for timer in timers.all())
    timers.resume_all()
    assert not any(timer.paused for timer in timers.all())
    timers.reset_all()
    assert all(timer.elapsed == 0.0 for timer in timers.all())
    assert timers.game_over_animation.duration == 2.0
