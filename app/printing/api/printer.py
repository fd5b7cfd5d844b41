"""FastAPI router for printer discovery, connection test and printing."""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.core.dependencies import (
    get_discovery_scanner,
    get_order_store,
    get_print_dispatcher,
    get_receipt_formatter,
    get_settings_store,
)
from app.orders.services.order_store import OrderStore
from app.settings.services.settings_store import PRINTER_IP, PRINTER_NAME, PRINTER_PORT, SettingsStore

from ..models.printer import ConnectionTestRequest, DiscoveryReport, PrintOutcome, PrinterTarget, PrintRequest
from ..services.discovery_service import DiscoveryScanner
from ..services.dispatcher import PrintDispatcher
from ..services.receipt import ReceiptFormatter, decode_receipt_data
from ..utils.base import InputValidationError, validate_address

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Printer"])


def _failure(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    outcome = PrintOutcome(success=False, message=message, details=details)
    return JSONResponse(status_code=status_code, content=outcome.model_dump(exclude_none=True))


def stored_printer(settings_store: SettingsStore) -> PrinterTarget:
    return PrinterTarget(
        ip_address=settings_store.get_value(PRINTER_IP),
        port=settings_store.get_value(PRINTER_PORT),
        name=settings_store.get_value(PRINTER_NAME),
    )


@router.post("/printer/discover", response_model=DiscoveryReport)
async def discover_printers(scanner: DiscoveryScanner = Depends(get_discovery_scanner)):
    """
    Sweep the local private networks for printer-like devices.

    Always returns a report; finding nothing is not an error.
    """
    return await scanner.discover()


@router.post("/printer/test", response_model=PrintOutcome, response_model_exclude_none=True)
async def test_printer_connection(
    request: ConnectionTestRequest,
    dispatcher: PrintDispatcher = Depends(get_print_dispatcher),
    settings: Settings = Depends(get_settings),
):
    """
    Check that a printer accepts TCP connections without printing anything.

    Retries a few times with a short pause, since printers waking from
    standby often refuse the first connection.
    """
    try:
        address = validate_address(request.ip, request.port)
    except InputValidationError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))

    attempts = max(1, settings.test_connection_attempts)
    for attempt in range(1, attempts + 1):
        if await dispatcher.test_connection(address.host, address.port, settings.test_connection_timeout_ms):
            return PrintOutcome(
                success=True,
                message="Printer connection successful",
                details=f"Connected to {address}"
            )
        logger.info(f"Printer test attempt {attempt}/{attempts} to {address} failed")
        if attempt < attempts:
            await asyncio.sleep(settings.test_connection_backoff_ms / 1000)

    return PrintOutcome(
        success=False,
        message=f"Cannot connect to printer at {address}",
        details=f"Failed to connect to {address}"
    )


@router.post("/print", response_model=PrintOutcome, response_model_exclude_none=True)
async def print_receipt(
    request: PrintRequest,
    dispatcher: PrintDispatcher = Depends(get_print_dispatcher),
    formatter: ReceiptFormatter = Depends(get_receipt_formatter),
    store: OrderStore = Depends(get_order_store),
    settings_store: SettingsStore = Depends(get_settings_store),
):
    """
    Send a receipt to a network printer and mark the order printed on success.

    ``receiptData`` is the ESC/POS stream. When it is omitted the stored order
    is rendered with the kitchen template.
    Without ``printerSettings`` the printer saved in the settings store is used.
    """
    target = request.printer_settings or stored_printer(settings_store)
    order_id = request.order.id if request.order else None

    if not target.ip_address or target.port in (None, "", 0):
        return _failure(status.HTTP_400_BAD_REQUEST, "Printer IP address and port are required")
    try:
        address = validate_address(target.ip_address, target.port)
    except InputValidationError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))

    try:
        if request.receipt_data is not None:
            payload = decode_receipt_data(request.receipt_data, request.receipt_encoding)
        else:
            order = store.get_order(order_id) if order_id is not None else None
            if order is None:
                return _failure(status.HTTP_400_BAD_REQUEST, "Receipt data or a known order is required")
            payload = formatter.format(order)
    except InputValidationError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))

    logger.info(f"Printing order {order_id} to {address}")
    outcome = await dispatcher.print(address.host, address.port, payload)
    if not outcome.success:
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, outcome.message, outcome.details)

    # Only a confirmed delivery marks the order printed
    if order_id is not None and store.mark_order_printed(order_id) is None:
        logger.warning(f"Printed order {order_id} is not in the order store")

    return outcome
