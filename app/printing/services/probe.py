"""TCP connectivity probe shared by discovery and the printer test action."""

import asyncio
import logging
from typing import Optional

from ..utils.base import NetworkAddress, ProbeResult

logger = logging.getLogger(__name__)


async def close_writer(writer: asyncio.StreamWriter) -> None:
    """Close a stream writer, ignoring errors from a peer that already went away."""
    writer.close()
    try:
        await writer.wait_closed()
    except (OSError, asyncio.TimeoutError) as e:
        logger.debug(f"Ignoring error while closing connection: {e}")


class ConnectivityProbe:
    """Checks whether a TCP endpoint accepts connections within a timeout.

    No protocol handshake happens beyond the TCP connect. Every failure mode
    (refused, unreachable, timeout) is reported as ``reachable=False``.
    """

    def __init__(self, timeout_ms: int = 2000):
        self.timeout_ms = timeout_ms

    async def __call__(self, address: NetworkAddress) -> ProbeResult:
        return await self.probe(address, self.timeout_ms)

    async def probe(self, address: NetworkAddress, timeout_ms: Optional[int] = None) -> ProbeResult:
        """Attempt one connection to ``address`` and close it immediately."""
        timeout = (timeout_ms if timeout_ms is not None else self.timeout_ms) / 1000
        try:
            # wait_for cancels the pending connect on timeout, which closes the socket
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(address.host, address.port),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            return ProbeResult(target=address, reachable=False, error="timeout")
        except (OSError, ValueError) as e:
            return ProbeResult(target=address, reachable=False, error=str(e) or type(e).__name__)

        await close_writer(writer)
        return ProbeResult(target=address, reachable=True)
