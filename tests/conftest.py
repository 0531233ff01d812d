"""Shared fixtures: a recording httpx.MockTransport stands in for the upstream APIs."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingUpstream:
    """Client factory backed by a MockTransport that remembers every request."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def __call__(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._dispatch))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture()
def upstream() -> Callable[..., RecordingUpstream]:
    """Build an upstream that answers every request with *status* and *body*."""

    def _build(status: int = 200, body: str = "", *, json: object = None) -> RecordingUpstream:
        def handler(_: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status, json=json)
            return httpx.Response(status, text=body)

        return RecordingUpstream(handler)

    return _build


@pytest.fixture()
def failing_upstream() -> Callable[[str], RecordingUpstream]:
    """Build an upstream whose connection fails with *description*."""

    def _build(description: str) -> RecordingUpstream:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(description, request=request)

        return RecordingUpstream(handler)

    return _build
