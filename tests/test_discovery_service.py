import logging

import pytest

from app.printing.services.discovery_service import (
    DiscoveryScanner,
    build_devices,
    generate_targets,
    network_prefix,
    select_networks,
)
from app.printing.utils.base import DeviceType, ProbeResult

FALLBACK = ["192.168.1", "192.168.0"]


@pytest.mark.parametrize("address, expected", [
    ("192.168.50.7/24", "192.168.50"),
    ("192.168.1.20", "192.168.1"),
    ("10.1.2.3", "10.1.2"),
    ("172.16.5.4", "172.16.5"),
    ("172.31.255.1", "172.31.255"),
    ("172.32.0.1", None),
    ("127.0.0.1", None),
    ("169.254.10.1", None),
    ("224.0.0.1", None),
    ("240.0.0.1", None),
    ("8.8.8.8", None),
    ("fe80::1", None),
    ("not-an-ip", None),
])
def test_network_prefix(address, expected):
    assert network_prefix(address) == expected


def test_select_networks_deduplicates_in_order():
    addresses = ["192.168.1.10", "10.0.0.2", "192.168.1.11", "127.0.0.1"]
    assert select_networks(addresses, FALLBACK) == ["192.168.1", "10.0.0"]


def test_select_networks_falls_back_when_nothing_usable():
    assert select_networks(["127.0.0.1", "169.254.1.1", "8.8.8.8"], FALLBACK) == FALLBACK
    assert select_networks([], FALLBACK) == FALLBACK


def test_generate_targets_is_full_cross_product():
    targets = list(generate_targets(["10.0.0", "10.0.1"], [9100, 80]))
    assert len(targets) == 2 * 254 * 2
    assert targets[0].host == "10.0.0.1" and targets[0].port == 9100
    assert targets[-1].host == "10.0.1.254" and targets[-1].port == 80


def test_build_devices_orders_by_confidence_and_keeps_ties_stable():
    devices = build_devices({
        "10.0.0.10": [80],
        "10.0.0.11": [9100],
        "10.0.0.12": [631],
        "10.0.0.13": [443],
    }, [9100, 515, 631, 80, 443, 8080])

    assert [d.confidence_score for d in devices] == [95, 80, 30, 30]
    assert [d.address for d in devices] == ["10.0.0.11", "10.0.0.12", "10.0.0.10", "10.0.0.13"]


def test_build_devices_describes_multiple_ports_in_port_order():
    devices = build_devices({"10.0.0.5": [80, 9100]}, [9100, 515, 631, 80, 443, 8080])
    device = devices[0]
    assert device.open_ports == [9100, 80]
    assert device.description == "Available ports: 9100, 80"
    assert device.device_type == DeviceType.ESCPOS_PRINTER


async def test_discover_finds_single_printer_on_stub_interface(fake_probe_factory):
    probe = fake_probe_factory({("192.168.50.20", 9100)})
    scanner = DiscoveryScanner(
        probe=probe,
        interface_provider=lambda: ["192.168.50.7/24"],
        batch_size=25,
    )

    report = await scanner.discover()

    assert report.success is True
    assert report.scanned_networks == ["192.168.50"]
    assert report.total_probes_issued == 254 * 6
    assert len(report.devices) == 1
    device = report.devices[0]
    assert device.address == "192.168.50.20"
    assert device.device_type == DeviceType.ESCPOS_PRINTER
    assert device.confidence_score == 95
    assert device.recommended_port == 9100
    assert device.description is None


async def test_discover_respects_batch_size(fake_probe_factory):
    probe = fake_probe_factory(delay=0.001)
    scanner = DiscoveryScanner(
        probe=probe,
        interface_provider=lambda: ["10.0.0.2"],
        ports=[9100, 80],
        batch_size=7,
    )

    report = await scanner.discover()

    assert len(probe.calls) == 254 * 2
    assert probe.max_in_flight == 7
    assert report.devices == []


async def test_discover_uses_fallback_networks_without_interfaces(fake_probe_factory):
    def no_interfaces():
        raise OSError("no interfaces")

    scanner = DiscoveryScanner(
        probe=fake_probe_factory(),
        interface_provider=no_interfaces,
        ports=[9100],
        fallback_networks=FALLBACK,
    )

    report = await scanner.discover()

    assert report.scanned_networks == FALLBACK
    assert report.total_probes_issued == 254 * len(FALLBACK)
    assert report.devices == []


async def test_discover_merges_ports_per_host_and_ranks(fake_probe_factory):
    probe = fake_probe_factory({
        ("10.0.0.3", 80),
        ("10.0.0.4", 9100),
        ("10.0.0.4", 80),
        ("10.0.0.5", 631),
    })
    scanner = DiscoveryScanner(probe=probe, interface_provider=lambda: ["10.0.0.2"], batch_size=30)

    report = await scanner.discover()

    assert [d.address for d in report.devices] == ["10.0.0.4", "10.0.0.5", "10.0.0.3"]
    assert report.devices[0].open_ports == [9100, 80]


async def test_discover_survives_a_failing_probe():
    async def broken_probe(target):
        if target.port == 80:
            raise RuntimeError("boom")
        return ProbeResult(target=target, reachable=target.host == "10.0.0.9")

    scanner = DiscoveryScanner(probe=broken_probe, interface_provider=lambda: ["10.0.0.2"], ports=[9100, 80])

    report = await scanner.discover()

    assert [d.address for d in report.devices] == ["10.0.0.9"]


async def test_discover_stops_at_deadline(fake_probe_factory):
    probe = fake_probe_factory(delay=0.05)
    scanner = DiscoveryScanner(
        probe=probe,
        interface_provider=lambda: ["10.0.0.2"],
        ports=[9100],
        batch_size=10,
        deadline_seconds=0.12,
    )

    report = await scanner.discover()

    assert report.completed is False
    assert 0 < report.total_probes_issued < 254
    assert report.total_probes_issued % 10 == 0


def test_rejects_non_positive_batch_size():
    with pytest.raises(ValueError):
        DiscoveryScanner(batch_size=0)


async def test_discover_logs_progress_at_info(fake_probe_factory, caplog):
    scanner = DiscoveryScanner(
        probe=fake_probe_factory(),
        interface_provider=lambda: ["10.0.0.2"],
        ports=[9100],
        batch_size=10,
    )

    with caplog.at_level(logging.INFO, logger="app.printing.services.discovery_service"):
        await scanner.discover()

    progress = [r for r in caplog.records if r.getMessage().startswith("Scanned ")]
    assert progress
    assert all(r.levelno == logging.INFO for r in progress)
    assert progress[0].getMessage() == "Scanned 10/254 targets..."
