"""Pydantic models for printer discovery and printing."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from ..utils.base import DeviceType


class DiscoveredDevice(BaseModel):
    """A host that accepted at least one probe."""
    address: str = Field(..., description="IPv4 address of the device")
    open_ports: List[int] = Field(default_factory=list, alias="openPorts", description="Ports that accepted a connection")
    device_type: DeviceType = Field(default=DeviceType.UNKNOWN, alias="deviceType", description="Detected device class")
    display_name: str = Field(..., alias="displayName", description="Human readable label")
    recommended_port: Optional[int] = Field(None, alias="recommendedPort", description="Port to print to")
    confidence_score: int = Field(default=0, ge=0, le=100, alias="confidenceScore", description="Printer likelihood 0-100")
    description: Optional[str] = Field(None, description="Extra detail, e.g. all open ports")

    class Config:
        populate_by_name = True


class DiscoveryReport(BaseModel):
    """Result of one discovery run. Always well formed, even when empty."""
    success: bool = True
    devices: List[DiscoveredDevice] = Field(default_factory=list)
    scanned_networks: List[str] = Field(default_factory=list, alias="scannedNetworks")
    total_probes_issued: int = Field(default=0, alias="totalScanned")
    completed: bool = Field(default=True, description="False when the run stopped at its deadline")
    summary: Optional[str] = None

    class Config:
        populate_by_name = True


class PrinterTarget(BaseModel):
    """Printer settings supplied with each request; validated by the dispatcher."""
    ip_address: Optional[str] = Field(None, alias="ipAddress")
    port: Optional[Union[int, str]] = None
    name: Optional[str] = None

    class Config:
        populate_by_name = True


class PrintOutcome(BaseModel):
    """Terminal result of a print or connection test."""
    success: bool
    message: str
    details: Optional[str] = None


class ConnectionTestRequest(BaseModel):
    ip: Optional[str] = None
    port: Optional[Union[int, str]] = None


class OrderRef(BaseModel):
    """The order being printed. Only the id is needed to mark it printed."""
    id: Optional[int] = None
    woocommerce_id: Optional[str] = Field(None, alias="woocommerceId")

    class Config:
        populate_by_name = True
        extra = "allow"


class PrintRequest(BaseModel):
    printer_settings: Optional[PrinterTarget] = Field(None, alias="printerSettings", description="Defaults to the stored printer settings")
    receipt_data: Optional[str] = Field(None, alias="receiptData", description="ESC/POS stream, one character per byte")
    receipt_encoding: str = Field(default="binary", alias="receiptEncoding", pattern="^(binary|base64)$")
    order: Optional[OrderRef] = None

    class Config:
        populate_by_name = True
