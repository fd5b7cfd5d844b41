"""Port-based classification of discovered hosts."""

from typing import Iterable, NamedTuple, Optional

from ..utils.base import DeviceType

ESCPOS_PORT = 9100
LPD_PORT = 515
IPP_PORT = 631
HTTP_PORT = 80
HTTPS_PORT = 443
HTTP_ALT_PORT = 8080

# Human readable names used in device display names
DEVICE_LABELS = {
    DeviceType.ESCPOS_PRINTER: "ESC/POS Printer",
    DeviceType.LPD_PRINTER: "LPD Printer",
    DeviceType.IPP_PRINTER: "IPP Printer",
    DeviceType.WEB_DEVICE: "Web Device",
    DeviceType.WEB_SERVER: "Web Server",
    DeviceType.UNKNOWN: "Device",
}


class Classification(NamedTuple):
    device_type: DeviceType
    confidence: int
    recommended_port: Optional[int]


def classify(open_ports: Iterable[int]) -> Classification:
    """
    Classify a host from the set of ports that accepted a connection.

    First match wins, strongest printer protocol first: raw ESC/POS (9100),
    LPD (515), IPP (631), then plain web ports. The result depends only on
    which ports are open, not on the order they were found.
    """
    ports = set(open_ports)

    if ESCPOS_PORT in ports:
        return Classification(DeviceType.ESCPOS_PRINTER, 95, ESCPOS_PORT)
    if LPD_PORT in ports:
        return Classification(DeviceType.LPD_PRINTER, 85, LPD_PORT)
    if IPP_PORT in ports:
        return Classification(DeviceType.IPP_PRINTER, 80, IPP_PORT)
    if HTTP_PORT in ports or HTTPS_PORT in ports:
        port = HTTP_PORT if HTTP_PORT in ports else HTTPS_PORT
        return Classification(DeviceType.WEB_DEVICE, 30, port)
    if HTTP_ALT_PORT in ports:
        return Classification(DeviceType.WEB_SERVER, 25, HTTP_ALT_PORT)
    return Classification(DeviceType.UNKNOWN, 0, None)


def display_name(device_type: DeviceType, host: str) -> str:
    return f"{DEVICE_LABELS[device_type]} at {host}"
