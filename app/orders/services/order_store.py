"""In-memory order store."""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from ..models.order import Order, OrderCreate, OrderStatus

logger = logging.getLogger(__name__)


class OrderStore:
    """Orders keyed by an auto-incrementing integer id.

    Nothing is persisted; a restart starts from an empty store.
    """

    def __init__(self):
        self._orders: Dict[int, Order] = {}
        self._next_id = 1

    def list_orders(self) -> List[Order]:
        """All orders, most recently received first."""
        return sorted(self._orders.values(), key=lambda o: o.received_at, reverse=True)

    def get_order(self, order_id: int) -> Optional[Order]:
        return self._orders.get(order_id)

    def get_order_by_woocommerce_id(self, woocommerce_id: str) -> Optional[Order]:
        for order in self._orders.values():
            if order.woocommerce_id == woocommerce_id:
                return order
        return None

    def create_order(self, data: OrderCreate) -> Order:
        order = Order(id=self._next_id, received_at=datetime.now(), **data.model_dump())
        self._orders[order.id] = order
        self._next_id += 1
        logger.info(f"Created order {order.id} ({order.woocommerce_id})")
        return order

    def update_order_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        order = self._orders.get(order_id)
        if order is None:
            return None
        updated = order.model_copy(update={"status": OrderStatus(status)})
        self._orders[order_id] = updated
        logger.info(f"Order {order_id} status {order.status.value} -> {updated.status.value}")
        return updated

    def mark_order_printed(self, order_id: int) -> Optional[Order]:
        """Stamp ``printed_at``. Only call after the printer confirmed delivery."""
        order = self._orders.get(order_id)
        if order is None:
            return None
        updated = order.model_copy(update={"printed_at": datetime.now()})
        self._orders[order_id] = updated
        logger.info(f"Order {order_id} marked printed")
        return updated
