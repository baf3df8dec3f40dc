"""User-facing messages for recovery failures."""

from __future__ import annotations

from streamadm.admin.errors import DecodeError, HTTPResponseError

# Status code -> message prefix for start failures with a decodable body.
START_FAILURE_PREFIXES: dict[int, str] = {
    404: "Not found",
    400: "Cannot start auto-restore",
}


def start_failure_message(err: Exception) -> str:
    """Describe why starting recovery failed.

    404 and 400 responses with a ``{"message": ...}`` body get a targeted
    message. Everything else, including bodies that fail to decode, falls
    back to the raw error text.
    """
    if isinstance(err, HTTPResponseError):
        prefix = START_FAILURE_PREFIXES.get(err.status_code)
        if prefix is not None:
            try:
                body = err.decode_generic_error_body()
            except DecodeError:
                pass
            else:
                return f"{prefix}: {body.message}"

    return f"error starting auto-restore: {err}"


def status_failure_message(err: Exception) -> str:
    """Describe why fetching recovery status failed."""
    return f"unable to fetch auto-restore status: {err}"
