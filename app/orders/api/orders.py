"""FastAPI router for the order dashboard."""

import json
import logging
from datetime import datetime, timedelta
from typing import List

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from app.core.dependencies import get_broadcaster, get_order_store

from ..models.order import Order, OrderCreate, OrderStatus, OrderStatusUpdate, OrderType
from ..services.broadcaster import NEW_ORDER, ORDER_STATUS_UPDATE, OrderBroadcaster
from ..services.order_store import OrderStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Orders"])
ws_router = APIRouter()


def _get_or_404(store: OrderStore, order_id: int) -> Order:
    order = store.get_order(order_id)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return order


@router.get("/orders", response_model=List[Order])
async def list_orders(store: OrderStore = Depends(get_order_store)):
    """List all orders, newest first."""
    return store.list_orders()


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(order_id: int, store: OrderStore = Depends(get_order_store)):
    return _get_or_404(store, order_id)


@router.post("/orders", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderCreate,
    store: OrderStore = Depends(get_order_store),
    broadcaster: OrderBroadcaster = Depends(get_broadcaster),
):
    """Create an order and announce it to every connected dashboard."""
    order = store.create_order(request)
    await broadcaster.broadcast(NEW_ORDER, order)
    return order


@router.patch("/orders/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: int,
    request: OrderStatusUpdate,
    store: OrderStore = Depends(get_order_store),
    broadcaster: OrderBroadcaster = Depends(get_broadcaster),
):
    """Accept, refuse or complete an order."""
    valid = {s.value for s in OrderStatus}
    if request.status not in valid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid status"
        )

    order = store.update_order_status(order_id, OrderStatus(request.status))
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )

    await broadcaster.broadcast(ORDER_STATUS_UPDATE, order)
    return order


@router.patch("/orders/{order_id}/print", response_model=Order)
async def mark_order_printed(order_id: int, store: OrderStore = Depends(get_order_store)):
    """Record that an order was printed by some other means."""
    _get_or_404(store, order_id)
    return store.mark_order_printed(order_id)


@router.post("/test/order", response_model=Order)
async def create_test_order(
    store: OrderStore = Depends(get_order_store),
    broadcaster: OrderBroadcaster = Depends(get_broadcaster),
):
    """Create a sample delivery order for trying out the dashboard and printer."""
    now = datetime.now()
    test_order = OrderCreate(
        woocommerce_id=f"test-{int(now.timestamp() * 1000)}",
        status=OrderStatus.pending,
        type=OrderType.delivery,
        customer_name="Matti Meikäläinen",
        customer_phone="+358 40 123 4567",
        customer_email="matti@email.com",
        total="32.50€",
        subtotal="29.00€",
        delivery_fee="3.50€",
        items=json.dumps([
            {"name": "Margherita Pizza (L)", "quantity": 2, "price": "24.00€",
             "meta": [{"key": "Extra juusto", "value": "2.00€"}, {"key": "Kinkku", "value": "3.00€"}]},
            {"name": "Coca Cola 0.5L", "quantity": 1, "price": "3.50€", "meta": []},
        ]),
        notes="Ei sipulia, hyvin paistettuna",
        address_street="Esimerkkikatu 123 A 45",
        address_city="00100 Helsinki",
        address_instructions="2. kerros, ovikello 'Meikäläinen'",
        estimated_time=(now + timedelta(minutes=30)).strftime("%H.%M"),
    )

    order = store.create_order(test_order)
    await broadcaster.broadcast(NEW_ORDER, order)
    return order


@ws_router.websocket("/ws")
async def order_events(
    websocket: WebSocket,
    broadcaster: OrderBroadcaster = Depends(get_broadcaster),
):
    """Push NEW_ORDER and ORDER_STATUS_UPDATE events to a dashboard."""
    await broadcaster.connect(websocket)
    try:
        while True:
            # Clients only listen; incoming messages are ignored
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.disconnect(websocket)
