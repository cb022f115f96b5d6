"""Integration tests for owner/admin order mutations.

Covers:
- Item removal by index (PUT and DELETE), total recalculation, version bump.
- Removing the last item deletes the order.
- Cancellation rules for owners and administrators.
- Optimistic concurrency through ``expected_version``.
"""

from __future__ import annotations

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration


def _item_url(order, index, admin=False):
    prefix = "admin/orders" if admin else "orders"
    return f"/api/v1/{prefix}/{order.id}/items/{index}/"


class TestRemoveItem:
    @pytest.mark.parametrize("method", ["delete", "put"])
    def test_removes_line_and_recomputes_total(self, auth_client, order, method):
        response = getattr(auth_client, method)(_item_url(order, 0), format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == "59.95"
        assert data["version"] == 2
        assert [item["reference"] for item in data["items"]] == ["SW7005"]

    def test_removing_last_item_deletes_order(self, auth_client, make_order, customer_actor, product_b):
        order = make_order(customer_actor, [(product_b, 1)])

        response = auth_client.delete(_item_url(order, 0))

        assert response.status_code == 200
        assert response.json() == {
            "detail": "Order deleted (no items remaining).",
            "deleted": True,
        }
        assert not Order.objects.filter(id=order.id).exists()

    @pytest.mark.parametrize("index", [2, 99, -1])
    def test_index_out_of_range(self, auth_client, order, index):
        response = auth_client.delete(_item_url(order, index))

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "index_out_of_range"

    def test_stranger_is_forbidden(self, other_client, order):
        response = other_client.delete(_item_url(order, 0))
        assert response.status_code == 403

    def test_owner_blocked_once_confirmed(self, auth_client, order, order_service, admin_actor):
        order_service.update_status(order.id, OrderStatus.CONFIRMED, admin_actor)

        response = auth_client.delete(_item_url(order, 0))

        assert response.status_code == 403
        assert Order.objects.get(id=order.id).items.count() == 2

    def test_admin_can_edit_confirmed_order(self, admin_client, order, order_service, admin_actor):
        order_service.update_status(order.id, OrderStatus.CONFIRMED, admin_actor)

        response = admin_client.delete(_item_url(order, 1, admin=True))

        assert response.status_code == 200
        assert response.json()["total"] == "113.00"

    def test_unknown_order(self, auth_client):
        response = auth_client.delete(
            "/api/v1/orders/00000000-0000-0000-0000-000000000000/items/0/"
        )
        assert response.status_code == 404


class TestCancelOrder:
    def test_owner_cancels_pending_order(self, auth_client, order):
        response = auth_client.post(f"/api/v1/orders/{order.id}/cancel/", format="json")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["version"] == 2

    def test_owner_cannot_cancel_twice(self, auth_client, order):
        auth_client.post(f"/api/v1/orders/{order.id}/cancel/")

        response = auth_client.post(f"/api/v1/orders/{order.id}/cancel/")

        assert response.status_code == 403

    def test_admin_cancels_shipped_order(self, admin_client, order, order_service, admin_actor):
        order_service.update_status(order.id, OrderStatus.SHIPPED, admin_actor)

        response = admin_client.post(f"/api/v1/admin/orders/{order.id}/cancel/")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_stranger_is_forbidden(self, other_client, order):
        response = other_client.post(f"/api/v1/orders/{order.id}/cancel/")
        assert response.status_code == 403


class TestCancelOrderByDelete:
    def test_owner_delete_cancels_and_keeps_order(self, auth_client, order):
        response = auth_client.delete(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(order.id)
        assert data["status"] == "cancelled"
        assert data["total"] == "172.95"
        assert Order.objects.filter(id=order.id).exists()

    def test_owner_blocked_once_confirmed(self, auth_client, order, order_service, admin_actor):
        order_service.update_status(order.id, OrderStatus.CONFIRMED, admin_actor)

        response = auth_client.delete(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 403
        assert Order.objects.get(id=order.id).status == OrderStatus.CONFIRMED

    def test_stranger_is_forbidden(self, other_client, order):
        response = other_client.delete(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 403
        assert Order.objects.get(id=order.id).status == OrderStatus.PENDING

    def test_unknown_order(self, auth_client):
        response = auth_client.delete("/api/v1/orders/00000000-0000-0000-0000-000000000000/")
        assert response.status_code == 404

    def test_stale_version_is_rejected(self, auth_client, order):
        auth_client.delete(_item_url(order, 0))

        response = auth_client.delete(
            f"/api/v1/orders/{order.id}/", {"expected_version": 1}, format="json"
        )

        assert response.status_code == 409


class TestExpectedVersion:
    def test_matching_version_is_accepted(self, auth_client, order):
        response = auth_client.post(
            f"/api/v1/orders/{order.id}/cancel/", {"expected_version": 1}, format="json"
        )
        assert response.status_code == 200

    def test_stale_version_is_rejected(self, auth_client, order):
        auth_client.delete(_item_url(order, 0))

        response = auth_client.delete(_item_url(order, 0), {"expected_version": 1}, format="json")

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "conflict"
        assert Order.objects.get(id=order.id).items.count() == 1

    def test_invalid_version_value(self, auth_client, order):
        response = auth_client.post(
            f"/api/v1/orders/{order.id}/cancel/", {"expected_version": 0}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "expected_version"
