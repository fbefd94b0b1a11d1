"""Pytest configuration and fixtures for resource-kit tests.

This file provides:
- make_response: Response factory with sensible defaults
- RecordingClient: In-memory client that records execute() calls
- stub_transport: httpx.MockTransport serving a small users API
- Fixtures: Shared clients and a blank action
"""

from __future__ import annotations

from typing import Any, Generator

import httpx
import pytest

from resource_kit.action import Action
from resource_kit.client import HttpClient
from resource_kit.models import ConnectionConfig, HttpVerb, Response

STUB_BASE_URL = "http://api.test"


def make_response(
    status: int = 200,
    body: str | bytes | None = None,
    headers: dict[str, list[str]] | None = None,
    url: str = "",
) -> Response:
    """Create a Response for testing.

    Prefer this over constructing Response directly - it provides sensible
    defaults and documents which fields are typically varied in tests.
    """
    return Response(status=status, headers=headers or {}, body=body, url=url)


class RecordingClient:
    """Client double that returns a canned response and records every call.

    Usage:
        client = RecordingClient(make_response(body="ok"))
        ActionInvoker.invoke(action, client)
        client.calls  # [(HttpVerb.GET, "/users", None)]
    """

    def __init__(self, response: Response | None = None) -> None:
        self.response = response or make_response()
        self.calls: list[tuple[HttpVerb, str, Any]] = []

    def execute(self, verb: HttpVerb, url: str, body: Any = None) -> Response:
        self.calls.append((verb, url, body))
        return self.response


def _stub_handler(request: httpx.Request) -> httpx.Response:
    """Routes for the stub users API.

    GET  /users           -> 200 "all users"
    GET  /users/bad_page  -> 404 "not found"
    GET  /users/12        -> 200 "user 12"
    POST /users           -> 200 echo of the request body
    GET  /paged           -> 200 the full request URL
    """
    method = request.method
    path = request.url.path

    if method == "GET" and path == "/users":
        return httpx.Response(200, text="all users")
    if method == "GET" and path == "/users/bad_page":
        return httpx.Response(404, text="not found")
    if method == "GET" and path == "/users/12":
        return httpx.Response(200, text="user 12")
    if method == "POST" and path == "/users":
        return httpx.Response(200, content=request.content)
    if method == "GET" and path == "/paged":
        return httpx.Response(200, text=str(request.url))
    return httpx.Response(500, text=f"no stub for {method} {path}")


@pytest.fixture
def stub_transport() -> httpx.MockTransport:
    return httpx.MockTransport(_stub_handler)


@pytest.fixture
def stub_client(stub_transport: httpx.MockTransport) -> Generator[HttpClient, None, None]:
    """HttpClient wired to the stub users API."""
    with HttpClient(ConnectionConfig(base_url=STUB_BASE_URL), transport=stub_transport) as client:
        yield client


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient(make_response(body="raw body"))


@pytest.fixture
def action() -> Action:
    return Action("find")
