"""Cluster admin API transport and error types."""

from .client import AdminAPI, BasicCredentials, TLSConfig, new_admin_api
from .errors import (
    AdminAPIError,
    DecodeError,
    ErrorKind,
    GenericErrorBody,
    HTTPResponseError,
    TransportError,
)

__all__ = [
    "AdminAPI",
    "BasicCredentials",
    "TLSConfig",
    "new_admin_api",
    "AdminAPIError",
    "DecodeError",
    "ErrorKind",
    "GenericErrorBody",
    "HTTPResponseError",
    "TransportError",
]
