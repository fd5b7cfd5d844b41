"""Printer discovery by sweeping local private subnets."""

import asyncio
import ipaddress
import logging
import socket
from typing import Awaitable, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

import psutil

from ..models.printer import DiscoveredDevice, DiscoveryReport
from ..utils.base import ProbeResult, ScanTarget
from .classifier import classify, display_name
from .probe import ConnectivityProbe

logger = logging.getLogger(__name__)

PRIVATE_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
]

DEFAULT_PORTS = [9100, 515, 631, 80, 443, 8080]
DEFAULT_FALLBACK_NETWORKS = ["192.168.1", "192.168.0", "10.0.1", "10.0.0"]

# Log progress every this many batches
PROGRESS_EVERY = 4

Probe = Callable[[ScanTarget], Awaitable[ProbeResult]]
InterfaceProvider = Callable[[], Iterable[str]]


def local_ipv4_addresses() -> List[str]:
    """Return every IPv4 address bound to a local network interface."""
    addresses = []
    for iface_addrs in psutil.net_if_addrs().values():
        for addr in iface_addrs:
            if addr.family == socket.AF_INET and addr.address:
                addresses.append(addr.address)
    return addresses


def network_prefix(address: str) -> Optional[str]:
    """
    Reduce a local interface address to its /24 prefix ("192.168.1").

    Returns None for addresses that should not be scanned: loopback,
    link-local, multicast, reserved and anything outside RFC1918.
    Accepts both plain addresses and interface notation ("10.0.0.7/24").
    """
    try:
        ip = ipaddress.ip_interface(address.strip()).ip
    except ValueError:
        return None

    if ip.version != 4:
        return None
    if ip.is_loopback or ip.is_link_local or ip.is_multicast or ip.is_reserved:
        return None
    if not any(ip in net for net in PRIVATE_NETWORKS):
        return None

    return ".".join(str(ip).split(".")[:3])


def select_networks(addresses: Iterable[str], fallback: Sequence[str]) -> List[str]:
    """Deduplicated scan prefixes for the given addresses, or ``fallback`` if none qualify."""
    networks: List[str] = []
    for address in addresses:
        prefix = network_prefix(address)
        if prefix and prefix not in networks:
            networks.append(prefix)
    return networks or list(fallback)


def generate_targets(networks: Sequence[str], ports: Sequence[int]) -> Iterator[ScanTarget]:
    """Every host 1-254 in each network, crossed with every port."""
    for network in networks:
        for host in range(1, 255):
            ip = f"{network}.{host}"
            for port in ports:
                yield ScanTarget(host=ip, port=port)


def build_devices(open_ports_by_host: Dict[str, List[int]], ports: Sequence[int]) -> List[DiscoveredDevice]:
    """Classify each responding host and order by confidence, highest first."""
    port_rank = {port: index for index, port in enumerate(ports)}
    devices = []

    for host, open_ports in open_ports_by_host.items():
        ordered_ports = sorted(set(open_ports), key=lambda p: (port_rank.get(p, len(port_rank)), p))
        device_type, confidence, recommended_port = classify(ordered_ports)

        description = None
        if len(ordered_ports) > 1:
            description = f"Available ports: {', '.join(map(str, ordered_ports))}"

        devices.append(DiscoveredDevice(
            address=host,
            open_ports=ordered_ports,
            device_type=device_type,
            display_name=display_name(device_type, host),
            recommended_port=recommended_port,
            confidence_score=confidence,
            description=description
        ))

    # sorted() is stable, so equal confidence keeps discovery order
    return sorted(devices, key=lambda d: -d.confidence_score)


class DiscoveryScanner:
    """Finds printer-like devices on the local networks.

    Probes run in fixed-size batches. A batch is gathered concurrently and
    fully settled before the next one starts, and open ports are folded into
    the per-host map only between batches, so no locking is needed.
    """

    def __init__(
        self,
        probe: Optional[Probe] = None,
        interface_provider: Optional[InterfaceProvider] = None,
        ports: Optional[Sequence[int]] = None,
        fallback_networks: Optional[Sequence[str]] = None,
        batch_size: int = 30,
        probe_timeout_ms: int = 2000,
        deadline_seconds: Optional[float] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.probe = probe or ConnectivityProbe(timeout_ms=probe_timeout_ms)
        self.interface_provider = interface_provider or local_ipv4_addresses
        self.ports = list(ports or DEFAULT_PORTS)
        self.fallback_networks = list(fallback_networks or DEFAULT_FALLBACK_NETWORKS)
        self.batch_size = batch_size
        self.probe_timeout_ms = probe_timeout_ms
        self.deadline_seconds = deadline_seconds

    def scan_networks(self) -> List[str]:
        try:
            addresses = list(self.interface_provider())
        except (OSError, RuntimeError) as e:
            logger.warning(f"Could not enumerate network interfaces: {e}")
            addresses = []
        return select_networks(addresses, self.fallback_networks)

    async def _probe(self, target: ScanTarget) -> ProbeResult:
        try:
            return await self.probe(target)
        except Exception as e:
            # A misbehaving probe must not abort the whole sweep
            logger.debug(f"Probe for {target} raised {e!r}")
            return ProbeResult(target=target, reachable=False, error=str(e))

    async def discover(self) -> DiscoveryReport:
        """Sweep every selected network and return the ranked device list."""
        networks = self.scan_networks()
        targets = list(generate_targets(networks, self.ports))
        total_batches = (len(targets) + self.batch_size - 1) // self.batch_size

        logger.info(
            f"Scanning networks {networks}: {len(targets)} probes in "
            f"{total_batches} batches of {self.batch_size}"
        )

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.deadline_seconds if self.deadline_seconds else None

        open_ports_by_host: Dict[str, List[int]] = {}
        issued = 0
        completed = True

        for batch_index, start in enumerate(range(0, len(targets), self.batch_size)):
            if deadline is not None and loop.time() >= deadline:
                logger.warning(f"Discovery deadline reached after {issued}/{len(targets)} probes")
                completed = False
                break

            batch = targets[start:start + self.batch_size]
            results = await asyncio.gather(*(self._probe(target) for target in batch))
            issued += len(batch)

            for result in results:
                if result.reachable:
                    open_ports_by_host.setdefault(result.target.host, []).append(result.target.port)

            if batch_index % PROGRESS_EVERY == 0:
                logger.info(f"Scanned {issued}/{len(targets)} targets...")

        devices = build_devices(open_ports_by_host, self.ports)
        logger.info(f"Discovery complete. Found {len(devices)} devices.")

        return DiscoveryReport(
            success=True,
            devices=devices,
            scanned_networks=networks,
            total_probes_issued=issued,
            completed=completed,
            summary=f"Found {len(devices)} devices across {len(networks)} networks"
        )
