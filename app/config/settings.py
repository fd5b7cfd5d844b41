"""Application settings and configuration."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # --- Printer Discovery Configuration ---
    # Per-probe TCP connect timeout used while sweeping subnets
    probe_timeout_ms: int = 2000
    # Number of probes in flight at once; batches run one after another
    scan_batch_size: int = 30
    # Printer and management ports probed on every host, in priority order
    scan_ports: List[int] = [9100, 515, 631, 80, 443, 8080]
    # Scanned when no private IPv4 interface is found
    fallback_networks: List[str] = ["192.168.1", "192.168.0", "10.0.1", "10.0.0"]
    # Optional overall bound for a discovery run, in seconds
    discovery_deadline_seconds: Optional[float] = None

    # --- Print Dispatch Configuration ---
    print_timeout_ms: int = 10000
    # Hold the connection open after writing so slow printers can drain
    print_drain_grace_ms: int = 2000

    # "Test printer" action in the settings dialog
    test_connection_timeout_ms: int = 3000
    test_connection_attempts: int = 2
    test_connection_backoff_ms: int = 1000

    # Seed values for the stored dashboard settings
    default_printer_ip: str = "192.168.1.100"
    default_printer_port: int = 9100
    default_printer_name: str = "Kitchen Printer"

    # --- Receipt Template ---
    receipt_header: str = "RAVINTOLA TIRVA"
    receipt_subtitle: str = "Keittiötilaus"
    receipt_footer: str = "Kiitos tilauksesta!"
    receipt_website: str = "www.ravintolatirva.fi"
    receipt_width: int = 32

    # --- FastAPI Configuration ---
    app_title: str = "Kitchen Order Printing Service"
    app_description: str = "Order dashboard backend with network receipt printer discovery and ESC/POS printing."
    app_version: str = "1.0.0"

    # CORS settings
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000"
    ]

    # Server settings
    host: str = "0.0.0.0"
    port: int = 5000

    # --- Logging Configuration ---
    log_level: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
