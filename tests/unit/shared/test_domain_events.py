"""Unit tests for domain events registration on entities."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCancelled, OrderCreated
from modules.orders.models import Order

pytestmark = pytest.mark.unit


def _order() -> Order:
    return Order(owner_id=uuid4(), status=OrderStatus.PENDING, total=Decimal("0.00"))


def test_order_registers_and_clears_domain_events():
    order = _order()

    assert order.domain_events == []

    event = OrderCreated(aggregate_id=order.id)
    order.add_domain_event(event)

    assert order.domain_events == [event]
    assert event.event_name == "OrderCreated"

    order.clear_domain_events()
    assert order.domain_events == []


def test_pull_domain_events_drains_in_order():
    order = _order()
    first = OrderCreated(aggregate_id=order.id)
    second = OrderCancelled(aggregate_id=order.id, previous_status="pending")
    order.add_domain_event(first)
    order.add_domain_event(second)

    assert order.pull_domain_events() == [first, second]
    assert order.pull_domain_events() == []


def test_events_are_immutable():
    event = OrderCreated(aggregate_id=uuid4())
    with pytest.raises(AttributeError):
        event.total = Decimal("1.00")
