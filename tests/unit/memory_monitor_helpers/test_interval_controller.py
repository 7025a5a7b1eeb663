"""Tests for the adaptive sampling interval."""

from dataclasses import replace

import pytest

from memsentinel.config import DEFAULT_CONFIG, MonitoringConfig
from memsentinel.memory_monitor_helpers.interval_controller import (
    IntervalPolicy,
    IntervalState,
    initial_state,
    next_interval,
)


@pytest.fixture
def policy():
    return IntervalPolicy(
        baseline=30000,
        min_interval=5000,
        max_interval=300000,
        heap_threshold=0.8,
        high_ticks_to_shrink=2,
        low_ticks_to_relax=3,
    )


def _run(state, fractions, policy):
    for fraction in fractions:
        state = next_interval(state, fraction, policy)
    return state


def test_policy_from_config():
    config = replace(DEFAULT_CONFIG, monitoring=MonitoringConfig(interval=20000, adaptive_interval=False))

    policy = IntervalPolicy.from_config(config)

    assert policy.baseline == 20000
    assert policy.heap_threshold == 0.8
    assert policy.adaptive is False


def test_single_high_tick_does_not_shrink(policy):
    state = next_interval(initial_state(policy), 0.9, policy)

    assert state == IntervalState(current_interval=30000, consecutive_high_ticks=1)


def test_sustained_pressure_halves_interval(policy):
    state = _run(initial_state(policy), [0.9, 0.9], policy)

    assert state.current_interval == 15000
    assert state.consecutive_high_ticks == 0


def test_shrinking_stops_at_floor(policy):
    state = _run(initial_state(policy), [0.95] * 20, policy)

    assert state.current_interval == 5000


def test_floor_follows_baseline_below_min_interval():
    policy = IntervalPolicy(
        baseline=2000,
        min_interval=5000,
        max_interval=300000,
        heap_threshold=0.8,
        high_ticks_to_shrink=1,
        low_ticks_to_relax=1,
    )

    assert initial_state(policy).current_interval == 2000
    assert next_interval(initial_state(policy), 0.9, policy).current_interval == 2000


def test_calm_relaxes_back_to_baseline(policy):
    state = IntervalState(current_interval=5000)

    state = _run(state, [0.1] * 3, policy)
    assert state.current_interval == 10000

    state = _run(state, [0.1] * 6, policy)
    assert state.current_interval == 30000

    state = _run(state, [0.1] * 10, policy)
    assert state.current_interval == 30000


def test_interrupted_pressure_resets_streak(policy):
    state = _run(initial_state(policy), [0.9, 0.5, 0.9], policy)

    assert state.current_interval == 30000
    assert state.consecutive_high_ticks == 1


def test_non_adaptive_policy_holds_baseline(policy):
    fixed = replace(policy, adaptive=False)

    state = _run(initial_state(fixed), [0.99] * 5, fixed)

    assert state == IntervalState(current_interval=30000)
