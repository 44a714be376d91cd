"""
Tests for order endpoints.
"""
from fastapi import status


def _order_payload(store, product, quantity=2):
    return {
        "store_id": store.id,
        "items": [{"product_id": product.id, "quantity": quantity, "price": str(product.price)}],
        "shipping_address": {"city": "Khartoum", "street": "Africa Road"},
        "notes": "Call on arrival",
    }


class TestPlaceOrder:
    """Customers placing orders."""

    def test_place_order(self, client, customer, store, product, customer_headers):
        response = client.post("/api/orders", json=_order_payload(store, product), headers=customer_headers)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "pending"
        assert data["total_amount"] == "16.00"
        assert data["customer_id"] == customer.id
        assert data["order_number"].startswith("ORD-")
        assert data["shipping_address"]["street"] == "Africa Road"

    def test_requires_items(self, client, store, product, customer_headers):
        payload = _order_payload(store, product)
        payload["items"] = []
        response = client.post("/api/orders", json=payload, headers=customer_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_zero_quantity(self, client, store, product, customer_headers):
        response = client.post("/api/orders", json=_order_payload(store, product, quantity=0), headers=customer_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_store(self, client, store, product, customer_headers):
        payload = _order_payload(store, product)
        payload["store_id"] = "missing"
        response = client.post("/api/orders", json=payload, headers=customer_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_authentication(self, client, store, product):
        response = client.post("/api/orders", json=_order_payload(store, product))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestReadOrders:
    """Order visibility."""

    def test_my_orders(self, client, customer, store, make_order, make_user, customer_headers):
        mine = make_order(customer, store, "10.00")
        make_order(make_user("someone"), store, "20.00")
        response = client.get("/api/orders/mine", headers=customer_headers)
        assert [o["id"] for o in response.json()] == [mine.id]

    def test_store_orders_for_owner(self, client, customer, store, make_order, merchant_headers):
        order = make_order(customer, store, "10.00")
        response = client.get(f"/api/orders/store/{store.id}", headers=merchant_headers)
        assert response.status_code == status.HTTP_200_OK
        assert [o["id"] for o in response.json()] == [order.id]

    def test_store_orders_hidden_from_customers(self, client, store, customer_headers):
        response = client.get(f"/api/orders/store/{store.id}", headers=customer_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_get_order(self, client, customer, store, make_order, customer_headers, merchant_headers):
        order = make_order(customer, store, "10.00")
        assert client.get(f"/api/orders/{order.id}", headers=customer_headers).status_code == status.HTTP_200_OK
        assert client.get(f"/api/orders/{order.id}", headers=merchant_headers).status_code == status.HTTP_200_OK

    def test_stranger_cannot_view(self, client, customer, store, make_order, make_user, headers_for):
        order = make_order(customer, store, "10.00")
        stranger = make_user("stranger")
        response = client.get(f"/api/orders/{order.id}", headers=headers_for(stranger))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_missing_order(self, client, customer_headers):
        assert client.get("/api/orders/missing", headers=customer_headers).status_code == status.HTTP_404_NOT_FOUND


class TestOrderStatus:
    """Status changes through the API."""

    def test_merchant_advances_order(self, client, customer, store, make_order, merchant_headers):
        order = make_order(customer, store, "10.00")
        for new_status in ("confirmed", "shipped", "delivered"):
            response = client.patch(
                f"/api/orders/{order.id}/status", json={"status": new_status}, headers=merchant_headers
            )
            assert response.status_code == status.HTTP_200_OK
            assert response.json()["status"] == new_status

    def test_illegal_transition_conflict(self, client, customer, store, make_order, merchant_headers):
        order = make_order(customer, store, "10.00", status="delivered")
        response = client.patch(f"/api/orders/{order.id}/status", json={"status": "pending"}, headers=merchant_headers)
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_unknown_status(self, client, customer, store, make_order, merchant_headers):
        order = make_order(customer, store, "10.00")
        response = client.patch(f"/api/orders/{order.id}/status", json={"status": "lost"}, headers=merchant_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_customer_may_cancel(self, client, customer, store, make_order, customer_headers):
        order = make_order(customer, store, "10.00")
        response = client.patch(f"/api/orders/{order.id}/status", json={"status": "cancelled"}, headers=customer_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "cancelled"

    def test_customer_cannot_confirm(self, client, customer, store, make_order, customer_headers):
        order = make_order(customer, store, "10.00")
        response = client.patch(f"/api/orders/{order.id}/status", json={"status": "confirmed"}, headers=customer_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN
