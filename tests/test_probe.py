import asyncio
import time

from app.printing.services.probe import ConnectivityProbe
from app.printing.utils.base import NetworkAddress


async def test_closed_port_is_unreachable(closed_port):
    probe = ConnectivityProbe(timeout_ms=2000)
    started = time.monotonic()

    result = await probe.probe(NetworkAddress("127.0.0.1", closed_port))

    assert result.reachable is False
    assert result.target.port == closed_port
    assert time.monotonic() - started < 2.5


async def test_listening_port_is_reachable(tcp_sink):
    probe = ConnectivityProbe(timeout_ms=2000)

    result = await probe(NetworkAddress("127.0.0.1", tcp_sink.port))

    assert result.reachable is True
    assert result.error is None


async def test_silent_host_times_out(monkeypatch):
    async def never_connects(*args, **kwargs):
        await asyncio.Event().wait()

    monkeypatch.setattr(asyncio, "open_connection", never_connects)
    probe = ConnectivityProbe(timeout_ms=200)
    started = time.monotonic()

    result = await probe.probe(NetworkAddress("10.255.255.1", 9100))

    assert result.reachable is False
    assert result.error == "timeout"
    assert time.monotonic() - started < 0.2 + 0.5


async def test_repeated_probes_agree(tcp_sink):
    probe = ConnectivityProbe(timeout_ms=1000)
    address = NetworkAddress("127.0.0.1", tcp_sink.port)

    first = await probe.probe(address)
    second = await probe.probe(address)

    assert first.reachable == second.reachable is True
