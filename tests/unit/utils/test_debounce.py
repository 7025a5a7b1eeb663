"""Tests for debounce and throttle primitives."""

import pytest

from memsentinel.utils import ConsecutiveDebouncer, throttle


class TestConsecutiveDebouncer:
    def test_opens_after_required_consecutive_observations(self) -> None:
        debouncer = ConsecutiveDebouncer(3)

        assert debouncer.observe("w5", True) is False
        assert debouncer.observe("w5", True) is False
        assert debouncer.observe("w5", True) is True
        assert debouncer.observe("w5", True) is True
        assert debouncer.streak("w5") == 4

    def test_false_observation_resets_only_its_key(self) -> None:
        """A reset on the short window leaves the long window's streak intact."""
        debouncer = ConsecutiveDebouncer(2)
        debouncer.observe(5, True)
        debouncer.observe(20, True)

        debouncer.observe(5, False)

        assert debouncer.streak(5) == 0
        assert debouncer.observe(20, True) is True

    def test_reset_all_keys(self) -> None:
        debouncer = ConsecutiveDebouncer(1)
        debouncer.observe("a", True)
        debouncer.observe("b", True)

        debouncer.reset()

        assert debouncer.streak("a") == 0
        assert debouncer.streak("b") == 0

    def test_required_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            ConsecutiveDebouncer(0)
        debouncer = ConsecutiveDebouncer(2)
        with pytest.raises(ValueError):
            debouncer.required = 0


def test_throttle_suppresses_calls_inside_interval() -> None:
    now = {"value": 0.0}
    calls = []

    @throttle(10.0, clock=lambda: now["value"])
    def record(value):
        calls.append(value)
        return value

    assert record(1) == 1
    assert record(2) is None
    now["value"] = 10.0
    assert record(3) == 3

    assert calls == [1, 3]
    assert record.suppressed == 1
