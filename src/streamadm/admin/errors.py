"""Error taxonomy for admin API calls."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Discriminates how an admin call failed."""

    TRANSPORT = "transport"  # No HTTP response at all
    HTTP_STATUS = "http_status"
    DECODE = "decode"


class AdminAPIError(Exception):
    """Base class for every admin API failure."""

    kind: ErrorKind


class TransportError(AdminAPIError):
    """No HTTP response was obtained from any node."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, urls: list[str] | None = None) -> None:
        super().__init__(message)
        self.urls = urls or []


class DecodeError(AdminAPIError):
    """A response body did not have the expected shape."""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, body: bytes = b"") -> None:
        super().__init__(message)
        self.body = body


@dataclass(frozen=True)
class GenericErrorBody:
    """The ``{"message": ...}`` body the cluster sends on failures."""

    message: str


class HTTPResponseError(AdminAPIError):
    """A node answered with a non-success status code."""

    kind = ErrorKind.HTTP_STATUS

    def __init__(
        self,
        method: str,
        url: str,
        status_code: int,
        reason: str = "",
        body: bytes = b"",
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.reason = reason or str(status_code)
        self.body = body
        super().__init__(
            f"request {method} {url} failed: {self.reason}, "
            f"body: {body.decode('utf-8', errors='replace')!r}"
        )

    def decode_generic_error_body(self) -> GenericErrorBody:
        """Decode the body as a generic ``{"message": str}`` error.

        Raises:
            DecodeError: if the body is not JSON or has no string message
        """
        try:
            data = json.loads(self.body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"unable to decode error body: {e}", self.body) from e

        if not isinstance(data, dict) or not isinstance(data.get("message"), str):
            raise DecodeError("error body has no message field", self.body)

        return GenericErrorBody(message=data["message"])
