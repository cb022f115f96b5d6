"""Order access policy.

| Operation            | Owner                  | Admin  |
|----------------------|------------------------|--------|
| view                 | always                 | always |
| remove item / cancel | while ``pending``      | always |
| change status        | never                  | always |
| delete               | never                  | always |

Callers check existence first; the policy only sees loaded orders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.orders.constants import OWNER_MUTABLE_STATES
from modules.orders.exceptions import OrderAccessDenied

if TYPE_CHECKING:
    from modules.orders.models import Order
    from shared.domain.actor import Actor


class OrderAccessPolicy:
    @staticmethod
    def is_owner(order: Order, actor: Actor) -> bool:
        return str(order.owner_id) == str(actor.requester_id)

    @staticmethod
    def is_admin(actor: Actor) -> bool:
        return actor.is_admin

    def ensure_can_view(self, order: Order, actor: Actor) -> None:
        if not (self.is_admin(actor) or self.is_owner(order, actor)):
            raise OrderAccessDenied("You are not allowed to view this order.")

    def ensure_can_modify(self, order: Order, actor: Actor) -> None:
        """Item removal and cancellation."""
        if self.is_admin(actor):
            return
        if not self.is_owner(order, actor):
            raise OrderAccessDenied("You are not allowed to modify this order.")
        if order.status not in OWNER_MUTABLE_STATES:
            raise OrderAccessDenied(
                f"Order can no longer be modified (status: {order.status})."
            )

    def ensure_can_change_status(self, order: Order, actor: Actor) -> None:
        if not self.is_admin(actor):
            raise OrderAccessDenied("Only administrators can change order status.")

    def ensure_can_delete(self, order: Order, actor: Actor) -> None:
        if not self.is_admin(actor):
            raise OrderAccessDenied("Only administrators can delete orders.")
