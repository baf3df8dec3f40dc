"""Automated recovery of topics from object storage."""

from .classify import start_failure_message, status_failure_message
from .client import (
    ALL_TOPICS_PATTERN,
    AUTOMATED_RECOVERY_PATH,
    RecoveryClient,
    RecoveryRequest,
    RecoveryStartResult,
    RecoveryStatus,
)
from .watch import WatchTimeout, watch_recovery

__all__ = [
    "ALL_TOPICS_PATTERN",
    "AUTOMATED_RECOVERY_PATH",
    "RecoveryClient",
    "RecoveryRequest",
    "RecoveryStartResult",
    "RecoveryStatus",
    "WatchTimeout",
    "start_failure_message",
    "status_failure_message",
    "watch_recovery",
]
