import pytest

from memsentinel.backoff_manager import BackoffManager
from memsentinel.backoff_manager_helpers.delay_calculator import DelayCalculator
from memsentinel.backoff_manager_helpers.retry_checker import RetryChecker
from memsentinel.backoff_manager_helpers.state_manager import BackoffStateManager
from memsentinel.backoff_manager_helpers.types import BackoffConfig, BackoffType


def test_delay_calculator_grows_exponentially_and_caps(monkeypatch):
    config = BackoffConfig(initial_delay=1.0, max_delay=5.0, multiplier=2.0, jitter_range=0.25)
    # Keep jitter deterministic
    monkeypatch.setattr("memsentinel.backoff_manager.random.uniform", lambda a, b: 0.0)

    delays = [DelayCalculator.calculate_full_delay(config, attempt, "webhook") for attempt in range(1, 5)]

    assert delays == [1.0, 2.0, 4.0, 5.0]


def test_jitter_never_drops_below_min_delay(monkeypatch):
    config = BackoffConfig(initial_delay=0.1, jitter_range=0.5, min_delay=0.08)
    monkeypatch.setattr("memsentinel.backoff_manager.random.uniform", lambda a, b: a)

    assert DelayCalculator.apply_jitter(0.1, config) == pytest.approx(0.08)


def test_state_manager_tracks_and_resets_state():
    manager = BackoffStateManager()
    assert manager.update_failure_state("webhook", BackoffType.WEBHOOK_FAILURE) == 1
    assert manager.update_failure_state("webhook", BackoffType.WEBHOOK_FAILURE) == 2

    info = manager.get_backoff_info("webhook", BackoffType.WEBHOOK_FAILURE, BackoffConfig(max_attempts=3))
    assert info["attempt"] == 2
    assert info["can_retry"]

    manager.reset_backoff("webhook", BackoffType.WEBHOOK_FAILURE)
    info = manager.get_backoff_info("webhook", BackoffType.WEBHOOK_FAILURE, BackoffConfig())
    assert info["attempt"] == 0
    assert info["last_failure_time"] is None
    assert "webhook" not in manager.backoff_state

    # Resetting with a missing bucket should be a no-op
    manager.reset_backoff("console")


def test_resetting_one_type_keeps_the_others():
    manager = BackoffStateManager()
    manager.update_failure_state("webhook", BackoffType.WEBHOOK_FAILURE)
    manager.update_failure_state("webhook", BackoffType.CHANNEL_FAILURE)

    manager.reset_backoff("webhook", BackoffType.WEBHOOK_FAILURE)

    assert list(manager.backoff_state["webhook"]) == [BackoffType.CHANNEL_FAILURE]


def test_retry_checker_blocks_after_max_attempts():
    state_manager = BackoffStateManager()
    config = BackoffConfig(max_attempts=1)
    state_manager.update_failure_state("file", BackoffType.FILE_WRITE_FAILURE)

    assert not RetryChecker.should_retry(state_manager, "file", BackoffType.FILE_WRITE_FAILURE, config)


def test_max_attempts_override_applies_to_every_type():
    manager = BackoffManager(max_attempts=5)

    assert {config.max_attempts for config in manager.configs.values()} == {5}


def test_unknown_type_falls_back_to_channel_failure_config():
    manager = BackoffManager()
    manager.configs.pop(BackoffType.FILE_WRITE_FAILURE)

    assert manager.get_config(BackoffType.FILE_WRITE_FAILURE) is manager.configs[BackoffType.CHANNEL_FAILURE]


def test_backoff_manager_reports_status(monkeypatch):
    monkeypatch.setattr("memsentinel.backoff_manager.random.uniform", lambda a, b: 0.0)
    config = BackoffConfig(initial_delay=0.5, max_delay=2.0, multiplier=2.0, jitter_range=0.0, max_attempts=2)
    manager = BackoffManager(custom_configs={BackoffType.WEBHOOK_FAILURE: config})

    assert manager.calculate_delay("webhook", BackoffType.WEBHOOK_FAILURE) == 0.5
    assert manager.should_retry("webhook", BackoffType.WEBHOOK_FAILURE)
    assert manager.calculate_delay("webhook", BackoffType.WEBHOOK_FAILURE) == 1.0
    assert not manager.should_retry("webhook", BackoffType.WEBHOOK_FAILURE)

    # An explicit attempt previews the delay without recording a failure
    assert manager.calculate_delay("webhook", BackoffType.WEBHOOK_FAILURE, attempt=3) == 2.0
    assert manager.get_backoff_info("webhook", BackoffType.WEBHOOK_FAILURE)["attempt"] == 2

    manager.reset_backoff("webhook")
    assert manager.should_retry("webhook", BackoffType.WEBHOOK_FAILURE)

    manager.calculate_delay("console", BackoffType.CHANNEL_FAILURE)
    manager.clear()
    assert manager.backoff_state == {}
