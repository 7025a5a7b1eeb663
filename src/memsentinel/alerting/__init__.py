"""Leak alert routing: channels, throttling and the dispatcher."""

from .channels import CHANNEL_ERRORS, AlertChannel, FileChannel, LoggingChannel, WebhookChannel, build_channels
from .dispatcher import AlertDispatcher, escalate_severity
from .models import AlertRecord, AlertSeverity, DeliveryRequest
from .throttle import SignatureThrottle

__all__ = [
    "AlertChannel",
    "AlertDispatcher",
    "AlertRecord",
    "AlertSeverity",
    "CHANNEL_ERRORS",
    "DeliveryRequest",
    "FileChannel",
    "LoggingChannel",
    "SignatureThrottle",
    "WebhookChannel",
    "build_channels",
    "escalate_severity",
]
