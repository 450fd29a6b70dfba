from __future__ import annotations

import threading
from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

BASE_URL = "https://api.example.com"


@pytest.fixture
def mock_completion() -> Mock:
    """Create a mock completion recording ``success`` and ``failure``
    calls."""
    return Mock()


@pytest.fixture
def make_client() -> Generator[Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]]:
    """Create ``httpx.Client`` objects backed by a ``MockTransport``.

    The clients are closed at the end of the test.

    Example:
        >>> def test_get(make_client):
        ...     client = make_client(lambda request: httpx.Response(200))
        ...     assert client.get("https://api.example.com").status_code == 200
    """
    clients = []

    def _make_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make_client
    for client in clients:
        client.close()


@pytest.fixture
def gate() -> Generator[threading.Event]:
    """Create an event used to hold a worker inside an operation.

    The event is set at the end of the test so no worker stays blocked.
    """
    event = threading.Event()
    yield event
    event.set()
