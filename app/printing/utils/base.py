"""
Base types and errors for printer discovery and print dispatch
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

IPV4_PATTERN = re.compile(
    r"^(?:(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])$"
)

MIN_PORT = 1
MAX_PORT = 65535


class PrinterError(Exception):
    """Base class for discovery and printing failures"""


class InputValidationError(PrinterError, ValueError):
    """Malformed address or port, raised before any network I/O"""


class ConnectivityError(PrinterError):
    """Connection refused, unreachable or timed out"""


class TransmissionError(ConnectivityError):
    """Write failed part way through a print payload"""


class DeviceType(str, Enum):
    """Device classes recognised by port heuristics"""
    ESCPOS_PRINTER = "escpos_printer"
    LPD_PRINTER = "lpd_printer"
    IPP_PRINTER = "ipp_printer"
    WEB_DEVICE = "web_device"
    WEB_SERVER = "web_server"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class NetworkAddress:
    """Validated IPv4 host and TCP port"""
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


# A scan target is just an address produced by the scanner
ScanTarget = NetworkAddress


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one connect attempt"""
    target: ScanTarget
    reachable: bool
    error: Optional[str] = None


def parse_port(port: Any) -> int:
    """Coerce an int or numeric string to a port number in range."""
    if port is None or isinstance(port, bool):
        raise InputValidationError("Invalid port number (1-65535)")
    if isinstance(port, int):
        value = port
    else:
        text = str(port).strip()
        if not text.isdigit():
            raise InputValidationError("Invalid port number (1-65535)")
        value = int(text)
    if value < MIN_PORT or value > MAX_PORT:
        raise InputValidationError("Invalid port number (1-65535)")
    return value


def validate_address(host: Any, port: Any) -> NetworkAddress:
    """
    Validate a host/port pair supplied by a caller.

    Raises InputValidationError when either part is missing, the host is not a
    dotted-quad IPv4 literal (octets without leading zeros, which resolvers
    read as octal), or the port is outside 1-65535.
    """
    if not host or port is None or port == "" or port == 0:
        raise InputValidationError("IP address and port are required")
    host = str(host).strip()
    if not IPV4_PATTERN.match(host):
        raise InputValidationError("Invalid IP address format")
    return NetworkAddress(host=host, port=parse_port(port))
