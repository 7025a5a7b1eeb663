"""Tests for engine error types."""

from memsentinel.errors import ConfigError, DispatchError, MonitorError, SamplingError


class TestDispatchError:
    """Tests for DispatchError exception."""

    def test_rejected_without_reason(self) -> None:
        error = DispatchError.rejected("webhook")
        assert error.channel == "webhook"
        assert str(error) == "Channel 'webhook' rejected the alert"

    def test_rejected_with_reason(self) -> None:
        error = DispatchError.rejected("file", "disk full")
        assert str(error) == "Channel 'file' rejected the alert: disk full"

    def test_is_monitor_error(self) -> None:
        assert isinstance(DispatchError.rejected("console"), MonitorError)
        assert isinstance(DispatchError.rejected("console"), RuntimeError)


class TestSamplingError:
    def test_provider_defaults_to_host(self) -> None:
        assert SamplingError("no reading").provider == "host"

    def test_provider_recorded(self) -> None:
        error = SamplingError("no reading", provider="psutil")
        assert error.provider == "psutil"
        assert isinstance(error, MonitorError)


class TestConfigError:
    def test_out_of_range_message(self) -> None:
        error = ConfigError.out_of_range("threshold.heap", 1.5, 0.0, 1.0)

        assert str(error) == "threshold.heap must be between 0.0 and 1.0 (received 1.5)"
        assert error.field == "threshold.heap"
        assert error.value == 1.5
        assert isinstance(error, ValueError)

    def test_load_failed_names_resource(self) -> None:
        error = ConfigError.load_failed("/etc/memsentinel.json", "invalid JSON")

        assert str(error) == "Failed to load /etc/memsentinel.json: invalid JSON"
        assert error.field == "/etc/memsentinel.json"
