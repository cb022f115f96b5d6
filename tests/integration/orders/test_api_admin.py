"""Integration tests for the administrator order routes."""

from __future__ import annotations

import pytest

from modules.orders.models import Order

pytestmark = pytest.mark.integration


class TestSetStatus:
    def test_any_status_can_follow_any_status(self, admin_client, order):
        url = f"/api/v1/admin/orders/{order.id}/status/"

        shipped = admin_client.put(url, {"status": "shipped"}, format="json")
        back = admin_client.put(url, {"status": "pending"}, format="json")

        assert shipped.status_code == 200
        assert shipped.json()["status"] == "shipped"
        assert back.json()["status"] == "pending"
        assert back.json()["version"] == 3

    def test_invalid_status(self, admin_client, order):
        response = admin_client.put(
            f"/api/v1/admin/orders/{order.id}/status/", {"status": "lost"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["detail"] == (
            "Invalid status 'lost'. Valid statuses: pending, confirmed, "
            "processing, shipped, delivered, cancelled."
        )

    def test_missing_status(self, admin_client, order):
        response = admin_client.put(f"/api/v1/admin/orders/{order.id}/status/", {}, format="json")

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "status"

    def test_stale_version(self, admin_client, order):
        response = admin_client.put(
            f"/api/v1/admin/orders/{order.id}/status/",
            {"status": "confirmed", "expected_version": 5},
            format="json",
        )

        assert response.status_code == 409
        assert Order.objects.get(id=order.id).status == "pending"

    def test_customer_is_forbidden(self, auth_client, order):
        response = auth_client.put(
            f"/api/v1/admin/orders/{order.id}/status/", {"status": "shipped"}, format="json"
        )
        assert response.status_code == 403

    def test_unknown_order(self, admin_client):
        response = admin_client.put(
            "/api/v1/admin/orders/00000000-0000-0000-0000-000000000000/status/",
            {"status": "shipped"},
            format="json",
        )
        assert response.status_code == 404


class TestAdminDelete:
    def test_deletes_order(self, admin_client, order):
        response = admin_client.delete(f"/api/v1/admin/orders/{order.id}/")

        assert response.status_code == 204
        assert not Order.objects.filter(id=order.id).exists()

    def test_customer_cannot_use_admin_route(self, auth_client, order):
        response = auth_client.delete(f"/api/v1/admin/orders/{order.id}/")

        assert response.status_code == 403
        assert Order.objects.filter(id=order.id).exists()

    def test_owner_route_cancels_instead_of_deleting(self, auth_client, order):
        response = auth_client.delete(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 200
        assert Order.objects.get(id=order.id).status == "cancelled"


class TestAdminList:
    def test_lists_every_order(self, admin_client, make_order, customer_actor, other_actor, product_b):
        make_order(customer_actor)
        make_order(other_actor, [(product_b, 1)])

        response = admin_client.get("/api/v1/admin/orders/")

        assert response.status_code == 200
        assert response.json()["count"] == 2

    def test_filter_by_status(self, admin_client, make_order, customer_actor, order_service, admin_actor):
        pending = make_order(customer_actor)
        shipped = make_order(customer_actor)
        order_service.update_status(shipped.id, "shipped", admin_actor)

        response = admin_client.get("/api/v1/admin/orders/?status=pending")

        ids = [row["id"] for row in response.json()["results"]]
        assert ids == [str(pending.id)]

    def test_filter_by_owner_email(self, admin_client, make_order, customer_actor, other_actor, product_b):
        make_order(customer_actor)
        theirs = make_order(other_actor, [(product_b, 1)])

        response = admin_client.get("/api/v1/admin/orders/?email=OTHER@example.com")

        assert [row["id"] for row in response.json()["results"]] == [str(theirs.id)]

    def test_customer_is_forbidden(self, auth_client):
        assert auth_client.get("/api/v1/admin/orders/").status_code == 403
