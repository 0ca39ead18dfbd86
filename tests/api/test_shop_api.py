"""Tests for the shop HTTP endpoints."""

from fastapi.testclient import TestClient


class TestHealth:
    """Tests for health and request correlation."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "toolcart-api"

    def test_generates_request_id(self, client: TestClient) -> None:
        response = client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"


class TestProducts:
    """Tests for GET /products."""

    def test_list_all(self, client: TestClient) -> None:
        response = client.get("/products")
        assert response.status_code == 200
        assert response.json()["count"] == 6

    def test_filter(self, client: TestClient) -> None:
        response = client.get("/products", params={"q": "lamp", "category": "office"})
        products = response.json()["products"]
        assert [p["id"] for p in products] == ["p4"]
        assert products[0]["price"] == "£18.99"

    def test_records_activity(self, client: TestClient) -> None:
        client.get("/products", params={"q": "mug"})
        latest = client.get("/activity").json()[0]
        assert latest["event"] == "ui:search"
        assert latest["payload"]["input"] == {"q": "mug", "category": ""}


class TestCart:
    """Tests for the cart endpoints."""

    def test_empty_cart(self, client: TestClient) -> None:
        response = client.get("/cart")
        assert response.status_code == 200
        assert response.json() == {"itemCount": 0, "total": "£0.00", "totalMinor": 0, "items": []}

    def test_add_and_remove(self, client: TestClient) -> None:
        response = client.post("/cart/items", json={"productId": "p1", "quantity": 2})
        assert response.status_code == 200
        assert response.json()["totalMinor"] == 1798

        response = client.delete("/cart/items/p1")
        assert response.status_code == 200
        assert response.json()["itemCount"] == 0

    def test_unknown_product_is_404(self, client: TestClient) -> None:
        response = client.post("/cart/items", json={"productId": "p999"})
        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "PRODUCT_NOT_FOUND"
        assert data["message"] == "Unknown productId: p999"
        assert data["request_id"]

    def test_missing_product_id_is_422(self, client: TestClient) -> None:
        response = client.post("/cart/items", json={"quantity": 1})
        assert response.status_code == 422
        assert response.json()["message"] == "productId is required"

    def test_fractional_quantity_is_422(self, client: TestClient) -> None:
        response = client.post("/cart/items", json={"productId": "p1", "quantity": 1.5})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert client.get("/cart").json()["itemCount"] == 0

    def test_malformed_body_is_422(self, client: TestClient) -> None:
        response = client.post("/cart/items", json={"productId": "p1", "quantity": "lots"})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_failure_recorded_in_activity(self, client: TestClient) -> None:
        client.post("/cart/items", json={"productId": "p999"})
        latest = client.get("/activity").json()[0]
        assert latest["event"] == "ui:addToCart"
        assert latest["payload"]["error"]["error_code"] == "PRODUCT_NOT_FOUND"


class TestCheckout:
    """Tests for POST /checkout."""

    def test_empty_cart_is_409(self, client: TestClient) -> None:
        response = client.post("/checkout", json={"confirmed": True})
        assert response.status_code == 409
        assert response.json()["error_code"] == "CART_EMPTY"

    def test_confirmed_is_required(self, client: TestClient) -> None:
        response = client.post("/checkout", json={})
        assert response.status_code == 422

    def test_declined(self, client: TestClient) -> None:
        client.post("/cart/items", json={"productId": "p1"})
        response = client.post("/checkout", json={"confirmed": False})
        assert response.status_code == 200
        assert response.json() == {"ok": False, "message": "User cancelled checkout"}
        assert client.get("/cart").json()["itemCount"] == 1

    def test_standard_approved(self, client: TestClient) -> None:
        client.post("/cart/items", json={"productId": "p1", "quantity": 2})
        response = client.post("/checkout", json={"confirmed": True})
        data = response.json()
        assert data["ok"] is True
        assert data["charged"] == "£17.98"
        assert data["message"] == "Checkout complete"
        assert client.get("/cart").json()["itemCount"] == 0

    def test_standard_rejects_payment_intent_id(self, client: TestClient) -> None:
        client.post("/cart/items", json={"productId": "p1"})
        response = client.post(
            "/checkout", json={"confirmed": True, "paymentIntentId": "pi_00000001"}
        )
        assert response.status_code == 422
        assert response.json()["details"]["field"] == "paymentIntentId"
        assert client.get("/cart").json()["itemCount"] == 1

    def test_ucp_flow(self, client: TestClient) -> None:
        client.put("/mode", json={"protocol": "ucp"})
        client.post("/cart/items", json={"productId": "p1", "quantity": 2})

        intent = client.post("/payment-intents").json()
        assert intent["amount"]["amountMinor"] == 1798

        response = client.post(
            "/checkout", json={"confirmed": True, "paymentIntentId": intent["id"]}
        )
        data = response.json()
        assert data["ok"] is True
        assert data["paymentIntent"]["status"] == "succeeded"

        order = client.get(f"/orders/{data['order']['id']}")
        assert order.status_code == 200
        assert order.json()["totals"]["total"]["amountMinor"] == 1798


class TestPaymentIntentsAndOrders:
    """Tests for payment intent and order endpoints."""

    def test_explicit_amount(self, client: TestClient) -> None:
        response = client.post("/payment-intents", json={"amountMinor": 500})
        assert response.status_code == 200
        assert response.json()["amount"] == {"currency": "GBP", "amountMinor": 500}

    def test_empty_cart_without_amount_is_422(self, client: TestClient) -> None:
        response = client.post("/payment-intents")
        assert response.status_code == 422
        assert response.json()["message"] == "amountMinor must be > 0 (or cart must be non-empty)"

    def test_unknown_order_is_404(self, client: TestClient) -> None:
        response = client.get("/orders/ord_missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER_NOT_FOUND"
