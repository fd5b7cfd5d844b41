"""FastAPI dependencies providing the shared service instances."""

from functools import lru_cache

from fastapi import Depends

from app.config import Settings, get_settings
from app.orders.services.broadcaster import OrderBroadcaster
from app.orders.services.order_store import OrderStore
from app.printing.services.discovery_service import DiscoveryScanner
from app.printing.services.dispatcher import PrintDispatcher
from app.printing.services.probe import ConnectivityProbe
from app.printing.services.receipt import ReceiptFormatter
from app.settings.services.settings_store import SettingsStore, default_settings


@lru_cache()
def get_order_store() -> OrderStore:
    """Process-wide order store."""
    return OrderStore()


@lru_cache()
def get_broadcaster() -> OrderBroadcaster:
    """Process-wide set of connected dashboard clients."""
    return OrderBroadcaster()


@lru_cache()
def get_settings_store() -> SettingsStore:
    """Process-wide dashboard settings, seeded from the configured printer."""
    settings = get_settings()
    return SettingsStore(default_settings(
        printer_ip=settings.default_printer_ip,
        printer_port=settings.default_printer_port,
        printer_name=settings.default_printer_name,
    ))

def get_discovery_scanner(settings: Settings = Depends(get_settings)) -> DiscoveryScanner:
    """A scanner configured from the current settings."""
    return DiscoveryScanner(
        ports=settings.scan_ports,
        fallback_networks=settings.fallback_networks,
        batch_size=settings.scan_batch_size,
        probe_timeout_ms=settings.probe_timeout_ms,
        deadline_seconds=settings.discovery_deadline_seconds,
    )


def get_print_dispatcher(settings: Settings = Depends(get_settings)) -> PrintDispatcher:
    """A dispatcher configured from the current settings."""
    return PrintDispatcher(
        print_timeout_ms=settings.print_timeout_ms,
        drain_grace_ms=settings.print_drain_grace_ms,
        probe=ConnectivityProbe(timeout_ms=settings.test_connection_timeout_ms),
    )


def get_receipt_formatter(settings: Settings = Depends(get_settings)) -> ReceiptFormatter:
    return ReceiptFormatter(
        header=settings.receipt_header,
        subtitle=settings.receipt_subtitle,
        footer=settings.receipt_footer,
        website=settings.receipt_website,
        width=settings.receipt_width,
    )
