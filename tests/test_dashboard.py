"""
Tests for the merchant dashboard.
"""
from fastapi import status


class TestDashboard:
    """Merchant statistics and order feed."""

    def test_stats(self, client, merchant, customer, store, product, make_order, merchant_headers):
        make_order(customer, store, "10.00", status="delivered")
        make_order(customer, store, "20.00", status="confirmed")
        make_order(customer, store, "1000.00", status="cancelled")

        response = client.get(f"/api/dashboard/stats/{merchant.id}", headers=merchant_headers)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total_sales"] == "30.00"
        assert data["total_orders"] == 3
        assert data["total_products"] == 1
        assert data["orders_by_status"] == {
            "pending": 0,
            "confirmed": 1,
            "shipped": 0,
            "delivered": 1,
            "cancelled": 1,
        }

    def test_orders_newest_first(self, client, merchant, customer, store, make_order, merchant_headers):
        first = make_order(customer, store, "10.00")
        second = make_order(customer, store, "20.00")
        response = client.get(f"/api/dashboard/orders/{merchant.id}", headers=merchant_headers)
        assert [o["id"] for o in response.json()] == [second.id, first.id]

    def test_other_users_forbidden(self, client, merchant, customer_headers):
        response = client.get(f"/api/dashboard/stats/{merchant.id}", headers=customer_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_allowed(self, client, merchant, store, admin_headers):
        response = client.get(f"/api/dashboard/stats/{merchant.id}", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["store_count"] == 1

    def test_requires_login(self, client, merchant):
        assert client.get(f"/api/dashboard/orders/{merchant.id}").status_code == status.HTTP_401_UNAUTHORIZED
