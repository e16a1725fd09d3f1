from __future__ import annotations


class GameTimer:
    """Pausable countdown that fires once per elapsed ``duration``."""

    def __init__(self, duration: float) -> None:
        if not duration > 0:
            raise ValueError(f"Timer duration must be positive, got {duration!r}")
        self.duration = float(duration)
        self.elapsed = 0.0
        self.paused = False

    def tick(self, dt: float) -> bool:
        """Advance by ``dt`` seconds; True when the threshold is crossed."""
        if self.paused:
            return False
        self.elapsed += dt
        if self.elapsed >= self.duration:
            self.reset()
            return True
        return False

    def reset(self) -> None:
        self.elapsed = 0.0

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def progress(self) -> float:
        return min(max(self.elapsed / self.duration, 0.0), 1.0)


class GameTimers:
    def __init__(
        self,
        gravity_interval: float,
        lock_delay: float,
        clear_duration: float,
        slide_duration: float,
        game_over_duration: float,
    ) -> None:
        self.gravity = GameTimer(gravity_interval)
        self.lock = GameTimer(lock_delay)
        self.clear_animation = GameTimer(clear_duration)
        # Drives the view's row-slide effect only; never gates a transition.
        self.slide_animation = GameTimer(slide_duration)
        self.game_over_animation = GameTimer(game_over_duration)

    def all(self) -> tuple[GameTimer, ...]:
        return (
            self.gravity,
            self.lock,
            self.clear_animation,
            self.slide_animation,
            self.game_over_animation,
        )

    def pause_all(self) -> None:
        for timer in self.all():
            timer.pause()

    def resume_all(self) -> None:
        for timer in self.all():
            timer.resume()

    def reset_all(self) -> None:
        for timer in self.all():
            timer.reset()
