"""Unit tests for OrderService.

Covers:
- Order building: snapshots, totals, input order, duplicate products.
- Catalog validation: missing, inactive, disallowed quantity.
- Amount limits: oversized subtotals and totals are rejected.
- Atomicity: a failing item leaves nothing behind.
- Item removal: total recomputation, cascading delete, bad indexes.
- Cancellation and status changes, including repeats.
- Existence is checked before authorization.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    EmptyOrder,
    InactiveProduct,
    InvalidOrderStatus,
    InvalidQuantity,
    ItemIndexOutOfRange,
    OrderAccessDenied,
    OrderAmountTooLarge,
    OrderConflict,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


def _assert_total_invariant(order: Order) -> None:
    items = list(OrderItem.objects.filter(order_id=order.id))
    stored = Order.objects.get(id=order.id)
    assert stored.total == sum((i.subtotal for i in items), Decimal("0.00"))


# ===========================================================================
# create_order
# ===========================================================================


class TestCreateOrderSuccess:
    def test_builds_lines_in_input_order_with_total(self, order_service, customer_actor, product_a, product_b):
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(product_id=product_a.id, quantity=10),
                CreateOrderItemDTO(product_id=product_b.id, quantity=5),
            ]
        )

        order = order_service.create_order(dto, customer_actor)

        items = list(order.items.all())
        assert [i.reference for i in items] == ["1-405", "SW7005"]
        assert items[0].subtotal == Decimal("113.00")
        assert items[1].subtotal == Decimal("59.95")
        assert order.total == Decimal("172.95")
        assert order.status == OrderStatus.PENDING
        assert order.version == 1
        _assert_total_invariant(order)

    def test_snapshots_product_fields(self, order, product_a):
        line = order.items.all()[0]
        assert line.product_id == product_a.id
        assert line.name == "ProMar 200 Interior Latex"
        assert line.size == "1L"
        assert line.unit_price == Decimal("11.30")

    def test_owner_is_requester_and_hydrated(self, order, customer):
        assert order.owner_id == customer.id
        assert order.owner.name == "Casey Customer"
        assert order.owner.email == "customer@example.com"

    def test_same_product_may_appear_twice(self, make_order, customer_actor, product_b):
        order = make_order(customer_actor, [(product_b, 1), (product_b, 2)])
        assert order.items.count() == 2
        assert order.total == Decimal("35.97")

    def test_unrestricted_product_accepts_any_quantity(self, make_order, customer_actor, product_b):
        order = make_order(customer_actor, [(product_b, 7)])
        assert order.total == Decimal("83.93")

    def test_stores_notes(self, order_service, customer_actor, product_b):
        dto = CreateOrderDTO(
            items=[CreateOrderItemDTO(product_id=product_b.id, quantity=1)],
            notes="Leave at the back door",
        )
        order = order_service.create_order(dto, customer_actor)
        assert order.notes == "Leave at the back door"

    def test_later_price_change_does_not_touch_lines(self, order, product_a):
        product_a.price = Decimal("99.99")
        product_a.name_en = "Renamed"
        product_a.save()

        line = OrderItem.objects.filter(order_id=order.id).order_by("position").first()
        assert line.unit_price == Decimal("11.30")
        assert line.name == "ProMar 200 Interior Latex"
        assert Order.objects.get(id=order.id).total == Decimal("172.95")


class TestCreateOrderValidation:
    def test_empty_cart_raises(self, order_service, customer_actor):
        with pytest.raises(EmptyOrder):
            order_service.create_order(CreateOrderDTO(items=[]), customer_actor)
        assert Order.objects.count() == 0

    def test_unknown_product_raises(self, order_service, customer_actor):
        dto = CreateOrderDTO(items=[CreateOrderItemDTO(product_id=uuid4(), quantity=1)])
        with pytest.raises(ProductNotFound):
            order_service.create_order(dto, customer_actor)

    def test_inactive_product_raises(self, order_service, customer_actor, inactive_product):
        dto = CreateOrderDTO(
            items=[CreateOrderItemDTO(product_id=inactive_product.id, quantity=1)]
        )
        with pytest.raises(InactiveProduct):
            order_service.create_order(dto, customer_actor)

    def test_disallowed_quantity_lists_allowed_set(self, order_service, customer_actor, product_a):
        dto = CreateOrderDTO(items=[CreateOrderItemDTO(product_id=product_a.id, quantity=7)])

        with pytest.raises(InvalidQuantity) as exc_info:
            order_service.create_order(dto, customer_actor)

        message = str(exc_info.value)
        assert "10, 30, 50, 60" in message
        assert "1-405" in message

    def test_failing_item_persists_nothing(self, order_service, customer_actor, product_a, product_b):
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(product_id=product_b.id, quantity=5),
                CreateOrderItemDTO(product_id=product_a.id, quantity=7),
            ]
        )

        with pytest.raises(InvalidQuantity):
            order_service.create_order(dto, customer_actor)

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_first_failing_item_wins(self, order_service, customer_actor, product_a, inactive_product):
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(product_id=inactive_product.id, quantity=1),
                CreateOrderItemDTO(product_id=product_a.id, quantity=7),
            ]
        )
        with pytest.raises(InactiveProduct):
            order_service.create_order(dto, customer_actor)


class TestCreateOrderAmountLimit:
    def test_line_subtotal_over_limit_raises(self, order_service, customer_actor, premium_product):
        dto = CreateOrderDTO(
            items=[CreateOrderItemDTO(product_id=premium_product.id, quantity=1000)]
        )

        with pytest.raises(OrderAmountTooLarge, match="PRO-MAX"):
            order_service.create_order(dto, customer_actor)

        assert Order.objects.count() == 0

    def test_running_total_over_limit_raises(self, order_service, customer_actor, premium_product, product_b):
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(product_id=product_b.id, quantity=5),
                CreateOrderItemDTO(product_id=premium_product.id, quantity=60),
                CreateOrderItemDTO(product_id=premium_product.id, quantity=60),
            ]
        )

        with pytest.raises(OrderAmountTooLarge):
            order_service.create_order(dto, customer_actor)

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_total_just_under_limit_is_stored(self, order_service, customer_actor, premium_product):
        dto = CreateOrderDTO(
            items=[CreateOrderItemDTO(product_id=premium_product.id, quantity=100)]
        )

        order = order_service.create_order(dto, customer_actor)

        assert order.total == Decimal("9999999999.00")
        _assert_total_invariant(order)


# ===========================================================================
# remove_item
# ===========================================================================


class TestRemoveItem:
    def test_removes_line_and_recomputes_total(self, order_service, order, customer_actor):
        outcome = order_service.remove_item(order.id, 0, customer_actor)

        assert outcome.deleted is False
        updated = outcome.order
        assert [i.reference for i in updated.items.all()] == ["SW7005"]
        assert updated.total == Decimal("59.95")
        assert updated.version == 2
        _assert_total_invariant(updated)

    def test_removing_last_line_deletes_order(self, order_service, make_order, customer_actor, product_b):
        order = make_order(customer_actor, [(product_b, 3)])

        outcome = order_service.remove_item(order.id, 0, customer_actor)

        assert outcome.deleted is True
        assert outcome.order is None
        assert not Order.objects.filter(id=order.id).exists()
        assert not OrderItem.objects.filter(order_id=order.id).exists()

    def test_positions_follow_remaining_sequence(self, order_service, make_order, customer_actor, product_a, product_b):
        order = make_order(customer_actor, [(product_a, 10), (product_b, 1), (product_b, 2)])

        order_service.remove_item(order.id, 1, customer_actor)
        outcome = order_service.remove_item(order.id, 1, customer_actor)

        assert [i.quantity for i in outcome.order.items.all()] == [10]
        assert outcome.order.total == Decimal("113.00")

    @pytest.mark.parametrize("index", [2, 99, -1])
    def test_bad_index_raises_and_changes_nothing(self, order_service, order, customer_actor, index):
        with pytest.raises(ItemIndexOutOfRange):
            order_service.remove_item(order.id, index, customer_actor)

        assert OrderItem.objects.filter(order_id=order.id).count() == 2
        assert Order.objects.get(id=order.id).version == 1

    def test_missing_order_raises_not_found(self, order_service, customer_actor):
        with pytest.raises(OrderNotFound):
            order_service.remove_item(uuid4(), 0, customer_actor)

    def test_stranger_is_forbidden(self, order_service, order, other_actor):
        with pytest.raises(OrderAccessDenied):
            order_service.remove_item(order.id, 0, other_actor)

    def test_owner_forbidden_once_confirmed(self, order_service, order, customer_actor, admin_actor):
        order_service.update_status(order.id, OrderStatus.CONFIRMED, admin_actor)

        with pytest.raises(OrderAccessDenied):
            order_service.remove_item(order.id, 0, customer_actor)

        outcome = order_service.remove_item(order.id, 0, admin_actor)
        assert outcome.order.total == Decimal("59.95")

    def test_stale_version_is_rejected_before_any_write(self, order_service, order, customer_actor):
        with pytest.raises(OrderConflict):
            order_service.remove_item(order.id, 0, customer_actor, expected_version=5)

        assert OrderItem.objects.filter(order_id=order.id).count() == 2

    def test_matching_version_is_accepted(self, order_service, order, customer_actor):
        outcome = order_service.remove_item(order.id, 0, customer_actor, expected_version=1)
        assert outcome.order.version == 2


# ===========================================================================
# cancel_order
# ===========================================================================


class TestCancelOrder:
    def test_owner_cancels_pending_order(self, order_service, order, customer_actor):
        cancelled = order_service.cancel_order(order.id, customer_actor)

        assert cancelled.status == OrderStatus.CANCELLED
        assert cancelled.total == Decimal("172.95")
        assert cancelled.items.count() == 2

    def test_owner_cannot_cancel_twice(self, order_service, order, customer_actor):
        order_service.cancel_order(order.id, customer_actor)
        with pytest.raises(OrderAccessDenied):
            order_service.cancel_order(order.id, customer_actor)

    def test_admin_may_cancel_repeatedly(self, order_service, order, admin_actor):
        order_service.cancel_order(order.id, admin_actor)
        again = order_service.cancel_order(order.id, admin_actor)

        assert again.status == OrderStatus.CANCELLED
        assert again.version == 3

    def test_stranger_is_forbidden(self, order_service, order, other_actor):
        with pytest.raises(OrderAccessDenied):
            order_service.cancel_order(order.id, other_actor)

    def test_missing_order_is_not_found_even_for_admin(self, order_service, admin_actor):
        with pytest.raises(OrderNotFound):
            order_service.cancel_order(uuid4(), admin_actor)

    def test_stale_version_conflicts(self, order_service, order, customer_actor):
        with pytest.raises(OrderConflict):
            order_service.cancel_order(order.id, customer_actor, expected_version=2)
        assert Order.objects.get(id=order.id).status == OrderStatus.PENDING


# ===========================================================================
# update_status / delete_order / get_order
# ===========================================================================


class TestUpdateStatus:
    def test_admin_can_jump_directly_to_shipped(self, order_service, order, admin_actor):
        updated = order_service.update_status(order.id, OrderStatus.SHIPPED, admin_actor)
        assert updated.status == OrderStatus.SHIPPED

    def test_can_go_back_from_delivered(self, order_service, order, admin_actor):
        order_service.update_status(order.id, OrderStatus.DELIVERED, admin_actor)
        updated = order_service.update_status(order.id, OrderStatus.PENDING, admin_actor)
        assert updated.status == OrderStatus.PENDING

    def test_same_status_is_allowed(self, order_service, order, admin_actor):
        updated = order_service.update_status(order.id, OrderStatus.PENDING, admin_actor)
        assert updated.status == OrderStatus.PENDING
        assert updated.version == 2

    def test_owner_cannot_change_status(self, order_service, order, customer_actor):
        with pytest.raises(OrderAccessDenied):
            order_service.update_status(order.id, OrderStatus.CONFIRMED, customer_actor)

    def test_unknown_status_names_valid_set(self, order_service, order, admin_actor):
        with pytest.raises(InvalidOrderStatus) as exc_info:
            order_service.update_status(order.id, "lost", admin_actor)
        assert "pending, confirmed, processing, shipped, delivered, cancelled" in str(
            exc_info.value
        )

    def test_authorization_checked_before_status_value(self, order_service, order, customer_actor):
        with pytest.raises(OrderAccessDenied):
            order_service.update_status(order.id, "lost", customer_actor)

    def test_existence_checked_first(self, order_service, customer_actor):
        with pytest.raises(OrderNotFound):
            order_service.update_status(uuid4(), "lost", customer_actor)


class TestDeleteOrder:
    def test_admin_deletes_order_and_lines(self, order_service, order, admin_actor):
        order_service.delete_order(order.id, admin_actor)

        assert not Order.objects.filter(id=order.id).exists()
        assert OrderItem.objects.count() == 0

    def test_owner_cannot_delete(self, order_service, order, customer_actor):
        with pytest.raises(OrderAccessDenied):
            order_service.delete_order(order.id, customer_actor)
        assert Order.objects.filter(id=order.id).exists()

    def test_missing_order(self, order_service, admin_actor):
        with pytest.raises(OrderNotFound):
            order_service.delete_order(uuid4(), admin_actor)


class TestGetOrder:
    def test_owner_and_admin_can_view(self, order_service, order, customer_actor, admin_actor):
        assert order_service.get_order(order.id, customer_actor).id == order.id
        assert order_service.get_order(order.id, admin_actor).id == order.id

    def test_stranger_cannot_view(self, order_service, order, other_actor):
        with pytest.raises(OrderAccessDenied):
            order_service.get_order(order.id, other_actor)

    def test_invalid_id_is_not_found(self, order_service, admin_actor):
        with pytest.raises(OrderNotFound):
            order_service.get_order("not-a-uuid", admin_actor)

    def test_list_orders_for_actor(self, order_service, make_order, customer_actor, other_actor, product_b):
        mine = make_order(customer_actor, [(product_b, 1)])
        make_order(other_actor, [(product_b, 1)])

        assert [o.id for o in order_service.list_orders_for(customer_actor)] == [mine.id]
        assert order_service.list_orders().count() == 2
