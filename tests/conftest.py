"""Shared fixtures: an in-memory admin API backed by httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from streamadm.admin.client import AdminAPI


class FakeCluster:
    """Records requests and answers them from a queue of canned responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: list[Callable[[httpx.Request], httpx.Response]] = []
        self.default: Callable[[httpx.Request], httpx.Response] | None = None

    def reply(self, status_code: int, body: Any = None, raw: bytes | None = None) -> None:
        """Queue a response."""
        content = raw if raw is not None else json.dumps(body).encode()
        self.responses.append(lambda request: httpx.Response(status_code, content=content))

    def always(self, status_code: int, body: Any) -> None:
        """Answer every request that has no queued response."""
        content = json.dumps(body).encode()
        self.default = lambda request: httpx.Response(status_code, content=content)

    def fail(self, exc_type: type[httpx.TransportError], message: str) -> None:
        """Queue a transport failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_type(message, request=request)

        self.responses.append(handler)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            return self.responses.pop(0)(request)
        if self.default is not None:
            return self.default(request)
        raise AssertionError(f"unexpected request {request.method} {request.url}")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def cluster() -> FakeCluster:
    """A fake cluster with no canned responses."""
    return FakeCluster()


@pytest.fixture
def admin(cluster: FakeCluster) -> Iterator[AdminAPI]:
    """An AdminAPI with a single node talking to the fake cluster."""
    api = AdminAPI(["127.0.0.1:9644"], transport=cluster.transport)
    yield api
    api.close()
