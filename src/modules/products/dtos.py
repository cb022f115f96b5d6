"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service
layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.products.models import DEFAULT_ALLOWED_QUANTITIES, DEFAULT_SIZE


def _check_quantities(values: Optional[List[int]]) -> Optional[List[int]]:
    if values is not None and any(q < 1 for q in values):
        raise ValueError("Allowed quantities must be positive integers.")
    return values

def _check_price(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is not None and value < 0:
        raise ValueError("Price must be a positive number.")
    return value

def _check_not_blank(value: Optional[str], label: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(f"{label} cannot be empty.")
    return value

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------

class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests."""

    model_config = ConfigDict(frozen=True)

    reference: str
    name_en: str
    name_fr: str
    price: Decimal
    size: str = DEFAULT_SIZE
    color: str = ""
    allowed_quantities: List[int] = list(DEFAULT_ALLOWED_QUANTITIES)
    related_products: List[str] = []

    @field_validator("reference")
    @classmethod
    def reference_must_not_be_empty(cls, v: str) -> str:
        return _check_not_blank(v, "Reference").upper()

    @field_validator("name_en")
    @classmethod
    def name_en_required(cls, v: str) -> str:
        return _check_not_blank(v, "English name")

    @field_validator("name_fr")
    @classmethod
    def name_fr_required(cls, v: str) -> str:
        return _check_not_blank(v, "French name")

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("allowed_quantities")
    @classmethod
    def quantities_must_be_positive(cls, v: List[int]) -> List[int]:
        return _check_quantities(v)

    @field_validator("related_products")
    @classmethod
    def normalise_related(cls, v: List[str]) -> List[str]:
        return [ref.strip().upper() for ref in v if ref.strip()]

class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    ``new_reference`` renames the product (used by the by-reference
    endpoint).
    """

    model_config = ConfigDict(frozen=True)

    name_en: Optional[str] = None
    name_fr: Optional[str] = None
    price: Optional[Decimal] = None
    size: Optional[str] = None
    color: Optional[str] = None
    allowed_quantities: Optional[List[int]] = None
    related_products: Optional[List[str]] = None
    is_active: Optional[bool] = None
    new_reference: Optional[str] = None

    @field_validator("name_en")
    @classmethod
    def name_en_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _check_not_blank(v, "English name")

    @field_validator("name_fr")
    @classmethod
    def name_fr_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _check_not_blank(v, "French name")

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _check_price(v)

    @field_validator("allowed_quantities")
    @classmethod
    def quantities_must_be_positive(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return _check_quantities(v)

    @field_validator("new_reference")
    @classmethod
    def normalise_reference(cls, v: Optional[str]) -> Optional[str]:
        v = _check_not_blank(v, "Reference")
        return v.upper() if v else v
