"""Order domain constants.

Defines status choices for the order state machine.  The transition
graph is flat: an administrator may move an order from any status to
any status.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    status: set(OrderStatus.values) for status in OrderStatus.values
}

OWNER_MUTABLE_STATES: set[str] = {OrderStatus.PENDING}

MONEY_QUANTUM = "0.01"

# Upper bounds that fit the order columns: PositiveIntegerField for
# quantity and DecimalField(max_digits=12, decimal_places=2) for money.
MAX_LINE_QUANTITY = 1_000_000
MAX_ORDER_AMOUNT = "9999999999.99"
