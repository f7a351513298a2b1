"""
Shared pytest fixtures for chat relay tests.
"""

import json
from typing import Any, Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from main import create_app

TEST_API_KEY = "sk-or-v1-test-0123456789"


class FakeOpenRouter:
    """
    Stands in for the OpenRouter API behind an httpx.MockTransport.

    Every outbound request is recorded; the reply defaults to an empty
    completion and can be swapped with reply_with() or fail_with().
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"choices": []})
        )

    def reply_with(self, *args: Any, **kwargs: Any) -> None:
        self._responder = lambda request: httpx.Response(*args, **kwargs)

    def fail_with(self, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc
        self._responder = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request reached the upstream"
        return self.requests[-1]

    @property
    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def upstream():
    return FakeOpenRouter()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", TEST_API_KEY)
    return TEST_API_KEY


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)


@pytest.fixture
def relay_client(upstream):
    """TestClient for the relay app with OpenRouter replaced by `upstream`."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app = create_app(http_client=http_client)
    with TestClient(app) as client:
        yield client
