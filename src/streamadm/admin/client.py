"""HTTP transport for the cluster admin API."""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from .errors import HTTPResponseError, TransportError

if TYPE_CHECKING:
    from streamadm.config import ConnectionConfig

logger = logging.getLogger(__name__)

# Errors raised before the request left the client; safe to try another node.
_NOT_SENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


@dataclass
class BasicCredentials:
    """Username/password pair attached to every admin request."""

    username: str = ""
    password: str = ""

    def auth(self) -> httpx.BasicAuth | None:
        """Return an httpx auth object, or None when no user is set."""
        if not self.username:
            return None
        return httpx.BasicAuth(self.username, self.password)


@dataclass
class TLSConfig:
    """TLS settings for admin API connections."""

    enabled: bool = False
    ca_file: str | None = None
    cert_file: str | None = None
    key_file: str | None = None
    insecure_skip_verify: bool = False

    def ssl_context(self) -> ssl.SSLContext | bool:
        """Build the value passed to httpx as ``verify``."""
        if not self.enabled:
            return True

        context = ssl.create_default_context(cafile=self.ca_file)
        if self.insecure_skip_verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        if self.cert_file:
            context.load_cert_chain(self.cert_file, self.key_file)
        return context


class AdminAPI:
    """Client for the admin API of a set of cluster nodes.

    Requests go either to one node (``send_one``) or to the first node that
    answers (``send_any``). A node that refuses the connection is skipped;
    once a request has been sent it is never replayed unless the caller
    marks it idempotent.
    """

    def __init__(
        self,
        urls: list[str],
        credentials: BasicCredentials | None = None,
        tls: TLSConfig | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the admin client.

        Args:
            urls: Admin API addresses, with or without a scheme
            credentials: Basic auth credentials
            tls: TLS settings; also selects the default scheme
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        if not urls:
            raise ValueError("at least one admin API address is required")

        self.credentials = credentials or BasicCredentials()
        self.tls = tls or TLSConfig()
        self.urls = [self._normalize_url(url) for url in urls]

        client_kwargs: dict[str, Any] = {
            "auth": self.credentials.auth(),
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        else:
            client_kwargs["verify"] = self.tls.ssl_context()
        self._client = httpx.Client(**client_kwargs)

    def _normalize_url(self, url: str) -> str:
        url = url.strip().rstrip("/")
        if "://" not in url:
            scheme = "https" if self.tls.enabled else "http"
            url = f"{scheme}://{url}"
        return url

    def _send(
        self,
        method: str,
        url: str,
        path: str,
        body: Any | None = None,
    ) -> httpx.Response:
        logger.debug(f"Sending {method} {url}{path}")
        if body is None:
            response = self._client.request(method, f"{url}{path}")
        else:
            response = self._client.request(method, f"{url}{path}", json=body)

        logger.debug(f"{method} {url}{path} -> {response.status_code}")
        if response.status_code >= 300:
            raise HTTPResponseError(
                method=method,
                url=f"{url}{path}",
                status_code=response.status_code,
                reason=f"{response.status_code} {response.reason_phrase}".strip(),
                body=response.content,
            )
        return response

    def send_one(
        self,
        method: str,
        url: str,
        path: str,
        body: Any | None = None,
    ) -> httpx.Response:
        """Send a request to a single node.

        Raises:
            TransportError: if no response was received
            HTTPResponseError: if the node answered with status >= 300
        """
        try:
            return self._send(method, url, path, body)
        except httpx.TransportError as e:
            raise TransportError(f"request {method} {url}{path} failed: {e}", [url]) from e

    def send_any(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        idempotent: bool = False,
    ) -> httpx.Response:
        """Send a request to the first node that accepts the connection.

        Args:
            method: HTTP method
            path: Request path, starting with ``/``
            body: JSON-serializable request body
            idempotent: Also move on to the next node after failures that
                happened once the request was already sent

        Raises:
            TransportError: if no node produced a response
            HTTPResponseError: if the answering node returned status >= 300
        """
        failures: list[str] = []
        for url in self.urls:
            try:
                return self._send(method, url, path, body)
            except httpx.TransportError as e:
                failures.append(f"{url}: {e}")
                if not idempotent and not isinstance(e, _NOT_SENT_ERRORS):
                    raise TransportError(
                        f"request {method} {url}{path} failed: {e}", [url]
                    ) from e
                logger.debug(f"Admin node {url} unavailable, trying next: {e}")

        raise TransportError(
            f"request {method} {path} failed on every admin node: {'; '.join(failures)}",
            list(self.urls),
        )

    def close(self) -> None:
        """Close the underlying HTTP connections."""
        self._client.close()

    def __enter__(self) -> AdminAPI:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def new_admin_api(
    config: ConnectionConfig,
    transport: httpx.BaseTransport | None = None,
) -> AdminAPI:
    """Build an AdminAPI from connection configuration."""
    return AdminAPI(
        urls=list(config.admin_hosts),
        credentials=BasicCredentials(config.username, config.password),
        tls=TLSConfig(
            enabled=config.tls_enabled,
            ca_file=config.ca_file,
            cert_file=config.cert_file,
            key_file=config.key_file,
            insecure_skip_verify=config.insecure_skip_verify,
        ),
        timeout=config.timeout,
        transport=transport,
    )
