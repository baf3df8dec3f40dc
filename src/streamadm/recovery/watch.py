"""Poll recovery status until it settles."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .client import RecoveryClient, RecoveryStatus

logger = logging.getLogger(__name__)

DEFAULT_TERMINAL_STATES = ("inactive",)


class WatchTimeout(Exception):
    """Recovery did not reach a terminal state before the deadline."""

    def __init__(self, last: RecoveryStatus, timeout: float) -> None:
        super().__init__(
            f"auto-restore still in state {last.state!r} after {timeout:g}s"
        )
        self.last = last
        self.timeout = timeout


def watch_recovery(
    client: RecoveryClient,
    interval: float = 5.0,
    terminal_states: tuple[str, ...] | list[str] = DEFAULT_TERMINAL_STATES,
    timeout: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Iterator[RecoveryStatus]:
    """Yield a snapshot each time the recovery state changes.

    Polls ``client.poll_recovery_status`` every ``interval`` seconds and
    stops after yielding a snapshot whose state is in ``terminal_states``.
    Poll errors propagate to the caller.

    Raises:
        WatchTimeout: if ``timeout`` seconds pass without a terminal state
    """
    if interval <= 0:
        raise ValueError("interval must be positive")
    if timeout is not None and timeout < 0:
        raise ValueError("timeout must not be negative")

    deadline = clock() + timeout if timeout is not None else None
    last_state: str | None = None

    while True:
        status = client.poll_recovery_status()
        if status.state != last_state:
            logger.debug(f"Recovery state changed: {last_state} -> {status.state}")
            last_state = status.state
            yield status

        if status.state in terminal_states:
            return

        if deadline is not None and clock() + interval > deadline:
            raise WatchTimeout(status, timeout)

        sleep(interval)
