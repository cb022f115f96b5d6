from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.models import User, UserRole
from modules.orders.catalog import ProductCatalogGateway
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from shared.domain.actor import Actor

PASSWORD = "testpass123"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture()
def customer():
    return User.objects.create_user(
        "customer@example.com", password=PASSWORD, name="Casey Customer"
    )


@pytest.fixture()
def other_customer():
    return User.objects.create_user(
        "other@example.com", password=PASSWORD, name="Olive Other"
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        "admin@example.com", password=PASSWORD, name="Ada Admin", role=UserRole.ADMIN
    )


@pytest.fixture()
def customer_actor(customer):
    return Actor.from_user(customer)


@pytest.fixture()
def other_actor(other_customer):
    return Actor.from_user(other_customer)


@pytest.fixture()
def admin_actor(admin_user):
    return Actor.from_user(admin_user)


@pytest.fixture()
def auth_client(customer):
    """APIClient force-authenticated as a customer."""
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


@pytest.fixture()
def other_client(other_customer):
    client = APIClient()
    client.force_authenticate(user=other_customer)
    return client


@pytest.fixture()
def admin_client(admin_user):
    """APIClient force-authenticated as an administrator."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def product_a():
    """Sold only in quantities of 10, 30, 50 or 60."""
    return Product.objects.create(
        reference="1-405",
        name_en="ProMar 200 Interior Latex",
        name_fr="ProMar 200 Latex Intérieur",
        price=Decimal("11.30"),
        allowed_quantities=[10, 30, 50, 60],
        related_products=["SW7005"],
    )


@pytest.fixture()
def product_b():
    """Any quantity allowed."""
    return Product.objects.create(
        reference="SW7005",
        name_en="Alabaster",
        name_fr="Albâtre",
        color="#F0EDE5",
        price=Decimal("11.99"),
        allowed_quantities=[],
    )


@pytest.fixture()
def premium_product():
    """Priced at the catalog maximum; any quantity allowed."""
    return Product.objects.create(
        reference="PRO-MAX",
        name_en="Emerald Designer Edition",
        name_fr="Emerald Édition Design",
        price=Decimal("99999999.99"),
        allowed_quantities=[],
    )


@pytest.fixture()
def inactive_product():
    return Product.objects.create(
        reference="OLD-1",
        name_en="Discontinued Primer",
        name_fr="Apprêt abandonné",
        price=Decimal("5.00"),
        allowed_quantities=[],
        is_active=False,
    )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        catalog_gateway=ProductCatalogGateway(ProductDjangoRepository()),
    )


@pytest.fixture()
def make_order(order_service, product_a, product_b):
    """Create an order through the service: A x10 then B x5 by default."""
    from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

    def _make(actor, items=None):
        items = items or [(product_a, 10), (product_b, 5)]
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(product_id=product.id, quantity=quantity)
                for product, quantity in items
            ]
        )
        return order_service.create_order(dto, actor)

    return _make


@pytest.fixture()
def order(make_order, customer_actor):
    return make_order(customer_actor)
