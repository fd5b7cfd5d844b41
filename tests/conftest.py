import asyncio
import socket
import socketserver
import threading
import time
from typing import Iterable, List, Set, Tuple

import pytest
from fastapi.testclient import TestClient

from app.printing.utils.base import ProbeResult, ScanTarget


class _SinkHandler(socketserver.BaseRequestHandler):
    def handle(self):
        chunks = []
        while True:
            data = self.request.recv(4096)
            if not data:
                break
            chunks.append(data)
        self.server.received.append(b"".join(chunks))


class _SinkServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self):
        super().__init__(("127.0.0.1", 0), _SinkHandler)
        self.received: List[bytes] = []

    @property
    def port(self) -> int:
        return self.server_address[1]

    def wait_for_payloads(self, count: int = 1, timeout: float = 3.0) -> List[bytes]:
        deadline = time.monotonic() + timeout
        while len(self.received) < count and time.monotonic() < deadline:
            time.sleep(0.01)
        return self.received


@pytest.fixture()
def tcp_sink():
    """
    A local printer stand-in: accepts connections on 127.0.0.1, reads until
    the client closes, and records every payload it received.
    """
    server = _SinkServer()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture()
def closed_port() -> int:
    """A local port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


class FakeProbe:
    """
    In-memory probe: only the given host/port pairs are reachable. Tracks the
    number of probes in flight to check the concurrency cap.
    """

    def __init__(self, open_endpoints: Iterable[Tuple[str, int]] = (), delay: float = 0):
        self.open_endpoints: Set[Tuple[str, int]] = set(open_endpoints)
        self.delay = delay
        self.calls: List[ScanTarget] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, target: ScanTarget) -> ProbeResult:
        self.calls.append(target)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        return ProbeResult(target=target, reachable=(target.host, target.port) in self.open_endpoints)


@pytest.fixture()
def fake_probe_factory():
    return FakeProbe


@pytest.fixture()
def settings_store():
    """Dashboard settings seeded with the stock defaults."""
    from app.settings.services.settings_store import SettingsStore

    return SettingsStore()


@pytest.fixture()
def app_client(settings_store):
    """
    TestClient with fresh service instances: an empty order store, default
    dashboard settings, a dispatcher without the drain grace period and a
    single test attempt. Yields (client, order_store).
    """
    from app.config import Settings, get_settings
    from app.core.dependencies import get_order_store, get_print_dispatcher, get_settings_store
    from app.main import app
    from app.orders.services.order_store import OrderStore
    from app.printing.services.dispatcher import PrintDispatcher
    from app.printing.services.probe import ConnectivityProbe

    settings = Settings(
        test_connection_attempts=1,
        test_connection_backoff_ms=0,
        test_connection_timeout_ms=1000,
    )
    store = OrderStore()

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_order_store] = lambda: store
    app.dependency_overrides[get_settings_store] = lambda: settings_store
    app.dependency_overrides[get_print_dispatcher] = lambda: PrintDispatcher(
        print_timeout_ms=3000,
        drain_grace_ms=0,
        probe=ConnectivityProbe(timeout_ms=1000),
    )
    with TestClient(app) as client:
        yield client, store
    app.dependency_overrides.clear()
