"""Rate-limited routing of leak signatures to alert channels."""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections import deque
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Deque, Dict, List, Optional, Sequence, Set

from memsentinel.backoff_manager import BackoffManager, BackoffType
from memsentinel.config import AlertingConfig, AlertRule
from memsentinel.errors import DispatchError
from memsentinel.utils import now_ms

from .channels import CHANNEL_ERRORS, AlertChannel
from .models import AlertRecord, AlertSeverity, DeliveryRequest
from .throttle import SignatureThrottle

if TYPE_CHECKING:
    from memsentinel.memory_monitor_helpers.trend_analyzer_helpers.signature_tracker import LeakSignature

logger = logging.getLogger(__name__)

_BACKOFF_TYPES = {
    "webhook": BackoffType.WEBHOOK_FAILURE,
    "file": BackoffType.FILE_WRITE_FAILURE,
}

_MS_PER_SECOND = 1000.0

DELIVERY_TASK_ERRORS = (RuntimeError, ValueError, TypeError, AttributeError, Exception)


def _matching_rules(rules: Sequence[AlertRule], probability: float) -> List[AlertRule]:
    return [rule for rule in rules if probability >= rule.min_probability]


def escalate_severity(delivery_number: int, *, confirmed: bool) -> AlertSeverity:
    """First delivery is low, second medium, later ones high; confirmed is at least medium."""
    severity = AlertSeverity.from_rank(delivery_number - 1)
    if confirmed:
        severity = severity.at_least(AlertSeverity.MEDIUM)
    return severity


class AlertDispatcher:
    """
    Routes leak signature detections to the configured channels.

    Every delivery runs as its own task so a slow channel never holds up the
    sampling loop; ``flush`` awaits whatever is still in flight.
    """

    def __init__(
        self,
        config: AlertingConfig,
        channels: Sequence[AlertChannel],
        *,
        backoff_manager: Optional[BackoffManager] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        on_failure: Optional[Callable[[str, BaseException], None]] = None,
    ) -> None:
        self._config = config
        self._on_failure = on_failure
        self._channels: List[AlertChannel] = list(channels)
        self._backoff = backoff_manager or BackoffManager(max_attempts=config.max_retries + 1)
        self._sleep = sleep
        self._clock = clock
        self._throttle = SignatureThrottle(config.throttle_ms / _MS_PER_SECOND, clock=clock)
        self._delivery_cycles: Dict[str, int] = {}
        self._records: Deque[AlertRecord] = deque(maxlen=config.history_size)
        self._pending: Set[asyncio.Task] = set()
        self._delivery_ids = itertools.count(1)
        self.delivered_count = 0
        self.failed_count = 0
        self.filtered_count = 0

    @property
    def channels(self) -> List[AlertChannel]:
        return list(self._channels)

    @property
    def suppressed_count(self) -> int:
        return self._throttle.suppressed_count

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def configure(self, config: AlertingConfig, channels: Optional[Sequence[AlertChannel]] = None) -> None:
        """Apply a new alerting configuration, keeping throttle state when the window is unchanged."""
        if config.throttle_ms != self._config.throttle_ms:
            self._throttle = SignatureThrottle(config.throttle_ms / _MS_PER_SECOND, clock=self._clock)
        if config.max_retries != self._config.max_retries:
            self._backoff = BackoffManager(max_attempts=config.max_retries + 1)
        if config.history_size != self._config.history_size:
            self._records = deque(self._records, maxlen=config.history_size)
        if channels is not None:
            self._channels = list(channels)
        self._config = config

    def dispatch(self, signature: "LeakSignature") -> bool:
        """
        Schedule delivery of a signature to every channel.

        Returns:
            True when deliveries were scheduled, False when the alert was
            disabled, filtered by rules or suppressed by the throttle
        """
        if not self._config.enabled or not self._channels:
            return False

        severity_floor = AlertSeverity.LOW
        if self._config.rules:
            matched = _matching_rules(self._config.rules, signature.probability)
            if not matched:
                self.filtered_count += 1
                logger.debug("Alert for %s matched no rule", signature.id)
                return False
            for rule in matched:
                severity_floor = severity_floor.at_least(AlertSeverity(rule.severity_floor))

        if not self._throttle.record(signature.id):
            logger.debug("Alert for %s suppressed by throttle", signature.id)
            return False

        cycle = self._delivery_cycles.get(signature.id, 0) + 1
        self._delivery_cycles[signature.id] = cycle
        severity = escalate_severity(cycle, confirmed=signature.is_confirmed)
        request = DeliveryRequest(
            signature_id=signature.id,
            severity=severity.at_least(severity_floor),
            growth_rate=signature.growth_rate,
            probability=signature.probability,
            timestamp=signature.last_seen,
        )
        for channel in self._channels:
            task = asyncio.create_task(self._run_delivery(channel, request))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return True

    def forget(self, signature_id: str) -> None:
        """Drop throttle and escalation state for a resolved or evicted signature."""
        self._throttle.forget(signature_id)
        self._delivery_cycles.pop(signature_id, None)

    async def flush(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def reset(self) -> None:
        self._throttle.reset()
        self._delivery_cycles.clear()
        self._backoff.clear()

    def get_stats(self, recent: int = 20) -> Dict[str, Any]:
        records = list(self._records)[-recent:] if recent > 0 else []
        return {
            "delivered": self.delivered_count,
            "suppressed": self.suppressed_count,
            "failed": self.failed_count,
            "filtered": self.filtered_count,
            "pending": self.pending_count,
            "recent": records,
        }

    def _record_failure(self, channel: AlertChannel, exc: BaseException) -> None:
        self.failed_count += 1
        if self._on_failure is not None:
            self._on_failure(channel.name, exc)

    async def _run_delivery(self, channel: AlertChannel, request: DeliveryRequest) -> None:
        # Attempts are counted per delivery; the channel name selects the backoff profile.
        delivery_key = f"{channel.name}#{next(self._delivery_ids)}"
        try:
            await self._deliver_with_retry(channel, request, delivery_key)
        except asyncio.CancelledError:
            raise
        except DELIVERY_TASK_ERRORS as exc:
            logger.exception("Alert %s delivery via %s crashed: %s", request.signature_id, channel.name, exc)
            self._record_failure(channel, exc)
        finally:
            self._backoff.reset_backoff(delivery_key)

    async def _deliver_with_retry(self, channel: AlertChannel, request: DeliveryRequest, delivery_key: str) -> None:
        backoff_type = _BACKOFF_TYPES.get(channel.name, BackoffType.CHANNEL_FAILURE)
        while True:
            try:
                if not await channel.deliver(request):
                    raise DispatchError.rejected(channel.name)
            except CHANNEL_ERRORS as exc:
                delay = self._backoff.calculate_delay(delivery_key, backoff_type)
                if not self._backoff.should_retry(delivery_key, backoff_type):
                    logger.error("Alert %s could not be delivered via %s: %s", request.signature_id, channel.name, exc)
                    self._record_failure(channel, exc)
                    return
                logger.warning("Delivery via %s failed (%s); retrying in %.2fs", channel.name, exc, delay)
                await self._sleep(delay)
                continue

            self._records.append(
                AlertRecord(
                    signature_id=request.signature_id,
                    channel=channel.name,
                    delivered_at=now_ms(),
                    severity=request.severity,
                )
            )
            self.delivered_count += 1
            return


__all__ = ["AlertDispatcher", "DELIVERY_TASK_ERRORS", "escalate_severity"]
