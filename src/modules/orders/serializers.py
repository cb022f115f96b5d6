"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.serializers import UserSummarySerializer
from modules.orders.constants import MAX_LINE_QUANTITY
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_LINE_QUANTITY)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload.

    An empty ``items`` list passes here and is rejected by the service.
    """

    items = CreateOrderItemSerializer(many=True, allow_empty=True)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class VersionedRequestSerializer(serializers.Serializer):
    """Optional optimistic-concurrency token sent with mutations."""

    expected_version = serializers.IntegerField(
        min_value=1, allow_null=True, default=None
    )


class UpdateStatusSerializer(VersionedRequestSerializer):
    # Membership is checked by the service so the error names the valid set.
    status = serializers.CharField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order lines with their product snapshot."""

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "position",
            "product_id",
            "reference",
            "name",
            "size",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with owner projection and items."""

    owner = UserSummarySerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "owner",
            "status",
            "total",
            "notes",
            "version",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lighter serializer for order lists (no line details)."""

    owner = UserSummarySerializer(read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "owner",
            "status",
            "total",
            "version",
            "item_count",
            "created_at",
        ]
        read_only_fields = fields

    def get_item_count(self, obj: Order) -> int:
        return len(obj.items.all())
