"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line.
- ``CreateOrderDTO``: input for order creation (nested items).

An empty ``items`` list is accepted here; the service rejects it
with ``EmptyOrder`` so the error carries the domain code.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import MAX_LINE_QUANTITY

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request.

    The client sends ``product_id`` and ``quantity``; price and names
    are resolved from the catalog by the Service Layer.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_in_range(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        if v > MAX_LINE_QUANTITY:
            raise ValueError(f"Quantity must be at most {MAX_LINE_QUANTITY}.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    The same product may appear on several lines.
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]
    notes: Optional[str] = ""
