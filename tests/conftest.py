"""Pytest configuration for cachedgql tests."""

from typing import Any

import httpx
import pytest

from cachedgql import GraphqlClientConfig

GRAPHQL_URL = "https://shop.example.com/graphql"


class MockEndpoint:
    """Scripted GraphQL endpoint backed by httpx.MockTransport.

    Queued outcomes are served in order: an ``(status, body)`` tuple
    becomes a response, an httpx exception class is raised. Once the
    queue is empty the default 200 response is served.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._outcomes: list[Any] = []
        self.default_body: Any = {"data": {"text": "t", "count": 1}}

    def respond_with(self, *outcomes: Any) -> None:
        """Queue responses or exceptions."""
        self._outcomes.extend(outcomes)

    @property
    def calls(self) -> int:
        """Number of requests that reached the endpoint."""
        return len(self.requests)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._outcomes.pop(0) if self._outcomes else (200, self.default_body)
        if isinstance(outcome, type) and issubclass(outcome, Exception):
            raise outcome("simulated failure", request=request)
        status, body = outcome
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)


@pytest.fixture
def endpoint() -> MockEndpoint:
    """Create a scripted endpoint."""
    return MockEndpoint()


@pytest.fixture
def config() -> GraphqlClientConfig:
    """Create a client configuration with one product cache."""
    return GraphqlClientConfig(
        url=GRAPHQL_URL,
        identifier="test",
        http_headers=["Authorization: Bearer token"],
        cache_configurations=["products:true:100:60", "categories:true:10:60"],
    )
