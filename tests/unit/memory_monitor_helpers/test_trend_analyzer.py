"""Tests for TrendAnalyzer."""

import pytest

from memsentinel.config import DEFAULT_CONFIG, merge_config
from memsentinel.memory_monitor_helpers import TrendAnalyzer
from memsentinel.memory_monitor_helpers.trend_analyzer_helpers import SignatureChange, SignatureStatus

MB = 1024 * 1024


@pytest.fixture
def high_config():
    return merge_config(DEFAULT_CONFIG, {"detection": {"sensitivity": "high", "resolveAfterMs": 10_000}})


def _feed(analyzer, samples):
    """Analyze a growing history one committed sample at a time."""
    return [analyzer.analyze(samples[: end + 1]) for end in range(len(samples))]


class TestTrendAnalyzer:
    def test_linear_growth_creates_then_escalates(self, high_config, make_samples):
        analyzer = TrendAnalyzer(high_config)
        samples = make_samples([10 * MB + i * 2 * MB for i in range(10)])

        per_tick = _feed(analyzer, samples)

        kinds = [[event.kind for event in events] for events in per_tick]
        assert kinds[:5] == [[], [], [], [], []]
        assert kinds[5] == [SignatureChange.CREATED]
        assert kinds[6] == [SignatureChange.UPDATED]
        assert kinds[7] == [SignatureChange.ESCALATED]
        assert kinds[8:] == [[SignatureChange.UPDATED], [SignatureChange.UPDATED]]

        leaks = analyzer.get_leaks()
        assert len(leaks) == 1
        assert leaks[0].status is SignatureStatus.CONFIRMED
        assert leaks[0].growth_rate == pytest.approx(2 * MB)
        assert "Rapid heap growth" in leaks[0].factors

    def test_stable_heap_has_no_leaks(self, high_config, make_samples):
        analyzer = TrendAnalyzer(high_config)

        per_tick = _feed(analyzer, make_samples([64 * MB] * 25))

        assert all(events == [] for events in per_tick)
        assert analyzer.get_leaks() == []

    def test_stale_signature_resolves(self, high_config, make_samples):
        analyzer = TrendAnalyzer(high_config)
        samples = make_samples([10 * MB + i * 2 * MB for i in range(7)])
        _feed(analyzer, samples)

        # heap falls back after a long quiet gap
        recovered = make_samples([10 * MB], start_ms=samples[-1].timestamp + 20_000)
        events = analyzer.analyze(samples + recovered)

        assert [event.kind for event in events] == [SignatureChange.RESOLVED]
        assert events[0].signature.status is SignatureStatus.RESOLVED

    def test_disabled_detection_is_silent(self, make_samples):
        config = merge_config(DEFAULT_CONFIG, {"detection": {"enabled": False, "sensitivity": "high"}})
        analyzer = TrendAnalyzer(config)

        per_tick = _feed(analyzer, make_samples([10 * MB + i * 2 * MB for i in range(10)]))

        assert all(events == [] for events in per_tick)

    def test_configure_can_disable(self, high_config, make_samples):
        analyzer = TrendAnalyzer(high_config)

        analyzer.configure(merge_config(high_config, {"detection": {"enabled": False}}))

        assert analyzer.enabled is False
        assert analyzer.analyze(make_samples([MB] * 5)) == []

    def test_reset_forgets_signatures_and_streaks(self, high_config, make_samples):
        analyzer = TrendAnalyzer(high_config)
        samples = make_samples([10 * MB + i * 2 * MB for i in range(7)])
        _feed(analyzer, samples)

        analyzer.reset()

        assert analyzer.get_leaks() == []
        assert analyzer.window_evaluator.streak(5) == 0

    def test_active_signature_pushed_out_of_log_is_reported(self, make_samples):
        config = merge_config(
            DEFAULT_CONFIG,
            {"detection": {"sensitivity": "high", "windows": [3, 5], "maxSignatures": 1}},
        )
        analyzer = TrendAnalyzer(config)

        per_tick = _feed(analyzer, make_samples([10 * MB + i * 2 * MB for i in range(6)]))

        evicted = [event for events in per_tick for event in events if event.kind is SignatureChange.EVICTED]
        assert len(evicted) == 1
        assert evicted[0].signature.window_size == 3
        assert [leak.window_size for leak in analyzer.get_leaks()] == [5]

    def test_sub_threshold_growth_counts_as_potential_leak(self, make_samples):
        config = merge_config(DEFAULT_CONFIG, {"detection": {"sensitivity": "high", "thresholds": {"confidence": 0.99}}})
        analyzer = TrendAnalyzer(config)
        # steady growth with a wobble keeps confidence just below 0.99
        heap = [10 * MB, 12 * MB, 13 * MB, 16 * MB, 17 * MB, 20 * MB]

        per_tick = _feed(analyzer, make_samples(heap))

        assert all(events == [] for events in per_tick)
        assert analyzer.potential_leaks > 0

        analyzer.reset()
        assert analyzer.potential_leaks == 0
