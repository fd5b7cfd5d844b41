"""WebSocket fan-out of order events to connected dashboards."""

import logging
from typing import Any, Dict, Set

from fastapi import WebSocket

from ..models.order import Order

logger = logging.getLogger(__name__)

NEW_ORDER = "NEW_ORDER"
ORDER_STATUS_UPDATE = "ORDER_STATUS_UPDATE"


class OrderBroadcaster:
    """Keeps the set of connected dashboard clients and pushes order events."""

    def __init__(self):
        self.connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.connections.add(websocket)
        logger.info("WebSocket client connected")

    def disconnect(self, websocket: WebSocket) -> None:
        self.connections.discard(websocket)
        logger.info("WebSocket client disconnected")

    async def broadcast(self, event_type: str, order: Order) -> None:
        message: Dict[str, Any] = {
            "type": event_type,
            "data": order.model_dump(mode="json", by_alias=True),
        }
        # Iterate over a copy; failed clients are removed
        for websocket in list(self.connections):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping WebSocket client after send failure: {e}")
                self.connections.discard(websocket)
