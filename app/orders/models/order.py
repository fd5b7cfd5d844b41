"""Pydantic models for kitchen orders."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    """Lifecycle of an order on the kitchen dashboard."""
    pending = "pending"
    processing = "processing"
    completed = "completed"
    refused = "refused"


class OrderType(str, Enum):
    delivery = "delivery"
    pickup = "pickup"


class OrderCreate(BaseModel):
    """Request model for creating an order."""
    woocommerce_id: str = Field(..., alias="woocommerceId", description="Order reference from the shop")
    status: OrderStatus = Field(default=OrderStatus.pending)
    type: OrderType = Field(..., description="delivery or pickup")
    customer_name: str = Field(..., alias="customerName")
    customer_phone: str = Field(..., alias="customerPhone")
    customer_email: str = Field(default="", alias="customerEmail")
    total: str
    subtotal: str
    delivery_fee: Optional[str] = Field(None, alias="deliveryFee")
    items: str = Field(..., description="JSON encoded list of line items")
    notes: Optional[str] = None
    address_street: Optional[str] = Field(None, alias="addressStreet")
    address_city: Optional[str] = Field(None, alias="addressCity")
    address_instructions: Optional[str] = Field(None, alias="addressInstructions")
    estimated_time: Optional[str] = Field(None, alias="estimatedTime")

    class Config:
        populate_by_name = True


class Order(OrderCreate):
    """A stored order."""
    id: int
    received_at: datetime = Field(default_factory=datetime.now, alias="receivedAt")
    printed_at: Optional[datetime] = Field(None, alias="printedAt")


class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None
