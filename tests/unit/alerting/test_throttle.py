"""Tests for alerting.throttle module."""

from memsentinel.alerting.throttle import SignatureThrottle


class _Clock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestSignatureThrottle:
    """Tests for SignatureThrottle class."""

    def test_first_alert_allowed(self) -> None:
        """First alert for a signature goes through."""
        throttle = SignatureThrottle(60.0, clock=_Clock())

        assert throttle.record("leak-a") is True
        assert throttle.suppressed_count == 0

    def test_repeat_inside_window_suppressed(self) -> None:
        """A second alert within the window is suppressed and counted."""
        clock = _Clock()
        throttle = SignatureThrottle(60.0, clock=clock)
        throttle.record("leak-a")

        clock.now = 59.9
        assert throttle.record("leak-a") is False
        assert throttle.suppressed_count == 1

    def test_window_expiry_allows_again(self) -> None:
        """Once the window has elapsed the signature may alert again."""
        clock = _Clock()
        throttle = SignatureThrottle(60.0, clock=clock)
        throttle.record("leak-a")

        clock.now = 60.0
        assert throttle.record("leak-a") is True

    def test_signatures_are_independent(self) -> None:
        """Throttling one signature never blocks another."""
        throttle = SignatureThrottle(60.0, clock=_Clock())
        throttle.record("leak-a")

        assert throttle.record("leak-b") is True
        assert throttle.record("leak-a") is False

    def test_explicit_timestamp_overrides_clock(self) -> None:
        """Passing ``now`` bypasses the injected clock."""
        throttle = SignatureThrottle(10.0, clock=_Clock(0.0))
        throttle.record("leak-a", now=100.0)

        assert throttle.record("leak-a", now=105.0) is False
        assert throttle.record("leak-a", now=111.0) is True

    def test_zero_window_disables_throttling(self) -> None:
        """A zero window lets every alert through."""
        throttle = SignatureThrottle(0.0, clock=_Clock())

        assert all(throttle.record("leak-a") for _ in range(5))
        assert throttle.suppressed_count == 0

    def test_forget_and_reset(self) -> None:
        """Forgotten signatures start fresh; reset also clears the counter."""
        throttle = SignatureThrottle(60.0, clock=_Clock())
        throttle.record("leak-a")
        throttle.record("leak-a")

        throttle.forget("leak-a")
        assert throttle.record("leak-a") is True

        throttle.reset()
        assert throttle.suppressed_count == 0
        assert throttle.record("leak-a") is True
