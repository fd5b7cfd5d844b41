"""Delivers rendered ESC/POS receipts to a network printer over raw TCP."""

import asyncio
import logging
from typing import Any, Optional

from ..models.printer import PrintOutcome
from ..utils.base import (
    ConnectivityError,
    InputValidationError,
    NetworkAddress,
    TransmissionError,
    validate_address,
)
from .probe import ConnectivityProbe, close_writer

logger = logging.getLogger(__name__)


class PrintDispatcher:
    """Sends one receipt per call to a chosen printer and reports the outcome.

    The payload is written verbatim as bytes. After the write has drained the
    connection is held for a short grace period so the printer can empty its
    receive buffer, since closing early can truncate output on slow printers.
    There is at most one attempt per call; retrying is up to the caller.
    """

    def __init__(
        self,
        print_timeout_ms: int = 10000,
        drain_grace_ms: int = 2000,
        probe: Optional[ConnectivityProbe] = None,
    ):
        self.print_timeout_ms = print_timeout_ms
        self.drain_grace_ms = drain_grace_ms
        self.probe = probe or ConnectivityProbe(timeout_ms=3000)

    async def print(self, host: Any, port: Any, payload: bytes) -> PrintOutcome:
        """Print ``payload`` to ``host:port``. Never raises."""
        try:
            address = validate_address(host, port)
        except InputValidationError as e:
            return PrintOutcome(success=False, message=str(e))

        try:
            await asyncio.wait_for(self._send(address, payload), timeout=self.print_timeout_ms / 1000)
        except asyncio.TimeoutError:
            logger.error(f"Print to {address} timed out after {self.print_timeout_ms}ms")
            return PrintOutcome(
                success=False,
                message=f"Print failed on {address}: Print timeout - printer may be offline",
                details=f"Failed to print to {address}"
            )
        except ConnectivityError as e:
            logger.error(f"Print to {address} failed: {e}")
            return PrintOutcome(
                success=False,
                message=f"Print failed on {address}: {e}",
                details=f"Failed to print to {address}"
            )

        logger.info(f"Sent {len(payload)} bytes to printer {address}")
        return PrintOutcome(
            success=True,
            message="Order printed successfully",
            details=f"Printed to {address}"
        )

    async def _send(self, address: NetworkAddress, payload: bytes) -> None:
        try:
            _, writer = await asyncio.open_connection(address.host, address.port)
        except OSError as e:
            raise ConnectivityError(str(e) or f"Cannot connect to {address}") from e

        logger.debug(f"Connected to printer {address}, sending data...")
        try:
            try:
                writer.write(bytes(payload))
                await writer.drain()
            except OSError as e:
                raise TransmissionError(str(e) or "Connection lost while sending") from e
            await asyncio.sleep(self.drain_grace_ms / 1000)
        finally:
            # Runs on success, error and cancellation by the outer timeout
            writer.close()
        await close_writer(writer)

    async def test_connection(self, host: Any, port: Any, timeout_ms: Optional[int] = None) -> bool:
        """Reachability check for the settings dialog. No receipt is sent."""
        try:
            address = validate_address(host, port)
        except InputValidationError:
            return False
        result = await self.probe.probe(address, timeout_ms)
        return result.reachable
