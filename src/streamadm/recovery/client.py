"""Automated recovery client - start recovery from object storage and poll it."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from streamadm.admin.client import new_admin_api
from streamadm.admin.errors import DecodeError

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from streamadm.admin.client import AdminAPI
    from streamadm.config import ConnectionConfig

logger = logging.getLogger(__name__)

AUTOMATED_RECOVERY_PATH = "/v1/cloud_storage/automated_recovery"
ALL_TOPICS_PATTERN = ".*"


@dataclass(frozen=True)
class RecoveryRequest:
    """Parameters of a start-recovery call."""

    topic_names_pattern: str

    def to_dict(self) -> dict[str, str]:
        return {"topic_names_pattern": self.topic_names_pattern}


@dataclass(frozen=True)
class RecoveryStartResult:
    """The cluster's acknowledgement that recovery was accepted.

    ``code`` is defined by the server and passed through as-is.
    """

    code: int
    message: str


@dataclass(frozen=True)
class RecoveryStatus:
    """A point-in-time snapshot of the recovery process."""

    state: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"state": self.state, **self.details}


def _decode_json(response: httpx.Response) -> Any:
    try:
        return json.loads(response.content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"unable to decode response body: {e}", response.content) from e


class RecoveryClient:
    """Starts and polls automated recovery through the admin API."""

    def __init__(self, admin: AdminAPI) -> None:
        self.admin = admin

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        factory: Callable[[ConnectionConfig], AdminAPI] = new_admin_api,
    ) -> RecoveryClient:
        """Build a client whose transport comes from ``factory``."""
        return cls(factory(config))

    def start_recovery(self, pattern: str) -> RecoveryStartResult:
        """Ask the cluster to start recovering topics matching ``pattern``.

        The request is sent once. A node is skipped only when it refuses the
        connection; anything after that surfaces as an error.

        Args:
            pattern: Regular expression selecting topics to restore

        Returns:
            RecoveryStartResult decoded from the 200 response

        Raises:
            HTTPResponseError: on any non-200 status
            TransportError: if no node returned a response
            DecodeError: if the 200 body is not ``{code, message}``
        """
        request = RecoveryRequest(topic_names_pattern=pattern)
        logger.debug(f"Starting automated recovery for pattern {pattern!r}")

        response = self.admin.send_any("POST", AUTOMATED_RECOVERY_PATH, request.to_dict())
        if response.status_code != 200:
            # 2xx codes other than 200 are not an acknowledgement.
            raise DecodeError(
                f"unexpected status {response.status_code} starting recovery",
                response.content,
            )

        data = _decode_json(response)
        if (
            not isinstance(data, dict)
            or not isinstance(data.get("code"), int)
            or isinstance(data.get("code"), bool)
            or not isinstance(data.get("message"), str)
        ):
            raise DecodeError("start response is missing code or message", response.content)

        return RecoveryStartResult(code=data["code"], message=data["message"])

    def poll_recovery_status(self) -> RecoveryStatus:
        """Fetch the current recovery status snapshot.

        Read-only; the transport may try every node in turn.

        Raises:
            HTTPResponseError: on any status >= 300
            TransportError: if no node returned a response
            DecodeError: if the body has no string ``state``
        """
        response = self.admin.send_any("GET", AUTOMATED_RECOVERY_PATH, idempotent=True)

        data = _decode_json(response)
        if not isinstance(data, dict) or not isinstance(data.get("state"), str):
            raise DecodeError("status response is missing state", response.content)

        details = {k: v for k, v in data.items() if k != "state"}
        return RecoveryStatus(state=data["state"], details=details)

    def close(self) -> None:
        self.admin.close()

    def __enter__(self) -> RecoveryClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
