import time

from app.core.dependencies import get_broadcaster

ORDER = {
    "woocommerceId": "5001",
    "type": "delivery",
    "customerName": "Liisa Esimerkki",
    "customerPhone": "050 111 2222",
    "total": "18.50 €",
    "subtotal": "15.00 €",
    "deliveryFee": "3.50 €",
    "items": '[{"name": "Falafel", "quantity": 1, "price": "15.00 €"}]',
    "addressStreet": "Testikatu 5",
    "addressCity": "00200 Helsinki",
}


def wait_for_listener(timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not get_broadcaster().connections and time.monotonic() < deadline:
        time.sleep(0.01)


def test_create_and_list_orders(app_client):
    client, store = app_client

    response = client.post("/api/orders", json=ORDER)

    assert response.status_code == 201
    created = response.json()
    assert created["id"] == 1
    assert created["status"] == "pending"
    assert created["woocommerceId"] == "5001"
    assert created["printedAt"] is None

    listed = client.get("/api/orders").json()
    assert [o["id"] for o in listed] == [1]
    assert client.get("/api/orders/1").json()["customerName"] == "Liisa Esimerkki"
    assert store.get_order(1) is not None


def test_unknown_order_is_404(app_client):
    client, _ = app_client
    assert client.get("/api/orders/99").status_code == 404
    assert client.patch("/api/orders/99/status", json={"status": "completed"}).status_code == 404
    assert client.patch("/api/orders/99/print").status_code == 404


def test_status_update(app_client):
    client, _ = app_client
    client.post("/api/orders", json=ORDER)

    response = client.patch("/api/orders/1/status", json={"status": "bogus"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid status"

    response = client.patch("/api/orders/1/status", json={"status": "processing"})
    assert response.status_code == 200
    assert response.json()["status"] == "processing"


def test_manual_mark_printed(app_client):
    client, _ = app_client
    client.post("/api/orders", json=ORDER)

    response = client.patch("/api/orders/1/print")

    assert response.status_code == 200
    assert response.json()["printedAt"] is not None


def test_new_orders_are_pushed_to_dashboards(app_client):
    client, _ = app_client

    with client.websocket_connect("/ws") as websocket:
        wait_for_listener()
        client.post("/api/test/order")
        message = websocket.receive_json()

    assert message["type"] == "NEW_ORDER"
    assert message["data"]["id"] == 1
    assert message["data"]["woocommerceId"].startswith("test-")
    assert message["data"]["type"] == "delivery"
