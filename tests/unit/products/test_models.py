"""Unit tests for the Product model."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError

from modules.products.models import Product

pytestmark = pytest.mark.unit


def _make_product(**overrides) -> Product:
    defaults = {
        "reference": "1-405",
        "name_en": "ProMar 200 Interior Latex",
        "name_fr": "ProMar 200 Latex Intérieur",
        "price": Decimal("11.30"),
    }
    defaults.update(overrides)
    return Product.objects.create(**defaults)


class TestProductDefaults:
    def test_defaults(self):
        product = _make_product()
        assert product.size == "1L"
        assert product.color == ""
        assert product.allowed_quantities == [1, 5, 10, 20]
        assert product.related_products == []
        assert product.is_active is True

    def test_default_quantities_are_not_shared(self):
        first = _make_product(reference="A-1")
        second = _make_product(reference="A-2")
        first.allowed_quantities.append(99)
        assert second.allowed_quantities == [1, 5, 10, 20]

    def test_str(self):
        assert str(_make_product()) == "1-405 - ProMar 200 Interior Latex"


class TestReference:
    def test_normalised_on_save(self):
        product = _make_product(reference="  sw7005 ")
        product.refresh_from_db()
        assert product.reference == "SW7005"

    def test_unique(self):
        _make_product(reference="SW7005")
        with pytest.raises(IntegrityError):
            _make_product(reference="sw7005")

    def test_clean_normalises(self):
        product = Product(reference="c-658", name_en="x", name_fr="x", price=Decimal("1"))
        product.clean()
        assert product.reference == "C-658"


class TestPrice:
    def test_clean_rejects_negative_price(self):
        product = Product(reference="X-1", name_en="x", name_fr="x", price=Decimal("-1"))
        with pytest.raises(ValidationError):
            product.clean()

    def test_database_rejects_negative_price(self):
        with pytest.raises(IntegrityError):
            _make_product(price=Decimal("-1.00"))
