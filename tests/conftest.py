"""
Shared pytest fixtures for pctl tests.

This module provides:
- FakeTransport: records every request and replays canned responses
- RecordingTransportFactory: hands out the fake and remembers credentials
- InMemorySessionStore: dict-backed session store
- Consoles that capture output for assertions
"""

import io
import os
import sys
from typing import Any, Dict, List, Tuple

import pytest
from rich.console import Console

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pctl.exceptions import PersistError, UnknownSessionError
from pctl.models.credentials import Credential, SessionData
from pctl.services.authenticator import Session
from pctl.services.endpoint_resolver import Endpoint
from pctl.services.session_store import SessionStore
from pctl.transport import PortainerRequest, Transport

ADDRESS = "https://portainer.example.com"


class FakeTransport(Transport):
    """
    Transport double keyed by (METHOD, path).

    Usage:
        def test_swarm(fake_transport):
            fake_transport.on("GET", "/api/endpoints/3/docker/swarm", {"ID": "s1"})
            ...
            assert fake_transport.described() == ["GET /api/endpoints/3/docker/swarm"]

    Registering several responses for the same key replays them in order;
    the last one sticks. A registered exception is raised instead of returned.
    Unregistered requests return None (an empty body). close() is counted.
    """

    def __init__(self):
        self.calls: List[PortainerRequest] = []
        self._responses: Dict[Tuple[str, str], List[Any]] = {}
        self.close_calls = 0

    def on(self, method: str, path: str, response: Any) -> "FakeTransport":
        self._responses.setdefault((method, path), []).append(response)
        return self

    def send(self, request: PortainerRequest) -> Any:
        self.calls.append(request)
        queue = self._responses.get((request.method.value, request.path))
        if not queue:
            return None
        response = queue[0] if len(queue) == 1 else queue.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.close_calls += 1

    def described(self) -> List[str]:
        return [request.describe() for request in self.calls]

    def methods(self) -> List[str]:
        return [request.method.value for request in self.calls]


class RecordingTransportFactory:
    """Transport factory returning one shared FakeTransport."""

    def __init__(self, transport: FakeTransport):
        self.transport = transport
        self.created: List[Tuple[str, Credential]] = []

    def __call__(self, address: str, credential: Credential) -> Transport:
        self.created.append((address, credential))
        return self.transport


class InMemorySessionStore(SessionStore):
    """Session store kept in a dict; set fail_writes to simulate a broken disk."""

    def __init__(self):
        self.sessions: Dict[str, SessionData] = {}
        self.writes = 0
        self.fail_writes = False

    def get(self, name: str) -> SessionData:
        if name not in self.sessions:
            raise UnknownSessionError(name)
        return self.sessions[name]

    def save(self, name: str, data: SessionData) -> None:
        if self.fail_writes:
            raise PersistError("Failed to write sessions file", context="disk full")
        self.writes += 1
        self.sessions[name] = data

    def remove(self, name: str) -> None:
        if self.fail_writes:
            raise PersistError("Failed to write sessions file", context="disk full")
        self.sessions.pop(name, None)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def transport_factory(fake_transport):
    return RecordingTransportFactory(fake_transport)


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def session(fake_transport):
    """A token session bound to the fake transport."""
    return Session(fake_transport, Credential.api_token("ptr_test"), ADDRESS)


@pytest.fixture
def endpoint(fake_transport):
    """Endpoint 3 bound to the fake transport."""
    return Endpoint(fake_transport, 3)


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def console(output):
    """Console writing to a buffer, wide enough that tables never wrap."""
    return Console(file=output, width=200, color_system=None)
