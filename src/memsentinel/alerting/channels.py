"""Alert delivery channels."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Protocol, Tuple, runtime_checkable

import aiohttp
import orjson

from memsentinel.config import AlertingConfig
from memsentinel.errors import DispatchError
from memsentinel.utils import format_bytes

from .models import AlertSeverity, DeliveryRequest

logger = logging.getLogger(__name__)

_HTTP_OK_MIN = 200
_HTTP_OK_MAX = 300

# DispatchError is a RuntimeError; orjson.JSONEncodeError is a TypeError.
CHANNEL_ERRORS: Tuple[type, ...] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
    RuntimeError,
    ValueError,
    TypeError,
    LookupError,
    AttributeError,
    ArithmeticError,
)

_LOG_LEVELS = {
    AlertSeverity.LOW: logging.INFO,
    AlertSeverity.MEDIUM: logging.WARNING,
    AlertSeverity.HIGH: logging.ERROR,
}


@runtime_checkable
class AlertChannel(Protocol):
    """Anything that can deliver a leak alert."""

    name: str

    async def deliver(self, request: DeliveryRequest) -> bool: ...


def describe(request: DeliveryRequest) -> str:
    return (
        f"Memory leak suspected [{request.signature_id}]: "
        f"growing {format_bytes(request.growth_rate)}/s, "
        f"probability {request.probability:.0%}"
    )


class LoggingChannel:
    """Writes alerts to the log with a level matching their severity."""

    name = "console"

    def __init__(self, service_name: str = "memsentinel") -> None:
        self.service_name = service_name

    async def deliver(self, request: DeliveryRequest) -> bool:
        message = f"MEMORY_MONITOR[{self.service_name}]: {describe(request)}"
        logger.log(_LOG_LEVELS[request.severity], message)
        return True


class FileChannel:
    """Appends alerts to a file as JSON lines."""

    name = "file"

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    async def deliver(self, request: DeliveryRequest) -> bool:
        line = orjson.dumps(request.to_dict(), option=orjson.OPT_APPEND_NEWLINE)
        await asyncio.to_thread(self._append, line)
        return True

    def _append(self, line: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("ab") as handle:
            handle.write(line)


class WebhookChannel:
    """POSTs alerts as JSON to an HTTP endpoint."""

    name = "webhook"

    def __init__(self, url: str, *, timeout_seconds: float) -> None:
        self.url = url
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @property
    def timeout(self) -> aiohttp.ClientTimeout:
        return self._timeout

    async def deliver(self, request: DeliveryRequest) -> bool:
        payload = request.to_dict()
        payload["message"] = describe(request)
        async with aiohttp.ClientSession(timeout=self._timeout) as session:
            async with session.post(self.url, json=payload) as response:
                if _HTTP_OK_MIN <= response.status < _HTTP_OK_MAX:
                    return True
                body = await response.text()
                raise DispatchError.rejected(self.name, f"HTTP {response.status}: {body[:200]}")


def build_channels(config: AlertingConfig, *, service_name: str = "memsentinel") -> List[AlertChannel]:
    """Instantiate the channels named in an alerting configuration."""
    channels: List[AlertChannel] = []
    for channel_name in config.channels:
        if channel_name == "console":
            channels.append(LoggingChannel(service_name))
        elif channel_name == "file":
            channels.append(FileChannel(config.file_path))
        elif channel_name == "webhook":
            channels.append(WebhookChannel(config.webhook_url, timeout_seconds=config.webhook_timeout_ms / 1000))
    return channels
