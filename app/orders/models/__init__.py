"""Order models."""

from .order import Order, OrderCreate, OrderStatus, OrderStatusUpdate, OrderType

__all__ = [
    "Order",
    "OrderCreate",
    "OrderStatus",
    "OrderStatusUpdate",
    "OrderType",
]
