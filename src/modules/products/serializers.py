"""Product DRF serializers for API output.

Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "id",
            "reference",
            "name_en",
            "name_fr",
            "size",
            "price",
            "color",
            "allowed_quantities",
            "related_products",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
