from decimal import Decimal

import pytest
from django.core.management import call_command

from modules.accounts.models import PasswordResetRequest, User
from modules.orders.models import Order
from modules.products.models import Product

pytestmark = pytest.mark.integration


def test_seed_data_builds_catalog_users_and_orders():
    call_command("seed_data")

    assert Product.objects.count() == 9
    assert User.objects.filter(role="admin").count() == 1
    assert User.objects.filter(role="user").count() == 3
    assert PasswordResetRequest.objects.filter(user__email="bob@example.com").count() == 1

    john = Order.objects.get(owner__email="john@example.com")
    assert john.total == Decimal("172.95")
    assert john.status == "pending"
    jane = Order.objects.get(owner__email="jane@example.com")
    assert jane.status == "confirmed"
    assert jane.total == Decimal("179.80")


def test_seed_data_is_rerunnable():
    call_command("seed_data")
    call_command("seed_data")

    assert Product.objects.count() == 9
    assert Order.objects.count() == 2
    assert PasswordResetRequest.objects.count() == 1
