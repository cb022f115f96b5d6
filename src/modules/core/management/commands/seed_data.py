from __future__ import annotations

from decimal import Decimal

from decouple import config
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.accounts.models import (
    PasswordResetRequest,
    ResetRequestStatus,
    User,
    UserRole,
)
from modules.orders.catalog import ProductCatalogGateway
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from shared.domain.actor import Actor

CATALOG = [
    {
        "reference": "1-405",
        "name_en": "ProMar 200 Interior Latex",
        "name_fr": "ProMar 200 Latex Intérieur",
        "price": Decimal("11.30"),
        "allowed_quantities": [10, 30, 50, 60],
        "related_products": ["8-814", "8-810"],
    },
    {
        "reference": "1-335",
        "name_en": "Duration Home Interior",
        "name_fr": "Duration Home Intérieur",
        "price": Decimal("9.99"),
        "allowed_quantities": [5, 10, 15, 20],
        "related_products": ["C-658"],
    },
    {
        "reference": "SW7005",
        "name_en": "Alabaster",
        "name_fr": "Albâtre",
        "color": "#F0EDE5",
        "price": Decimal("11.99"),
        "allowed_quantities": [1, 5, 10, 20],
        "related_products": ["SW7006", "SW7008"],
    },
    {
        "reference": "C-658",
        "name_en": "Emerald Urethane Trim Enamel",
        "name_fr": "Émail Urethane Emerald",
        "price": Decimal("11.99"),
        "allowed_quantities": [5, 10, 15, 20],
        "related_products": ["1-335"],
    },
    {
        "reference": "L-202",
        "name_en": "SuperPaint Interior Acrylic",
        "name_fr": "SuperPaint Acrylique Intérieur",
        "price": Decimal("11.99"),
        "allowed_quantities": [5, 10, 15, 20],
        "related_products": ["8-814"],
    },
    {
        "reference": "8-814",
        "name_en": "Premium Wall & Wood Primer",
        "name_fr": "Primaire Premium Mur & Bois",
        "price": Decimal("8.99"),
        "allowed_quantities": [5, 10, 20, 30],
        "related_products": ["1-405", "L-202"],
    },
    {
        "reference": "8-810",
        "name_en": "Multi-Purpose Latex Primer",
        "name_fr": "Primaire Latex Multi-Usage",
        "price": Decimal("7.99"),
        "allowed_quantities": [10, 20, 30, 40],
        "related_products": ["1-405"],
    },
    {
        "reference": "SW7006",
        "name_en": "Extra White",
        "name_fr": "Blanc Extra",
        "color": "#FFFFFF",
        "price": Decimal("10.99"),
        "allowed_quantities": [1, 5, 10, 20],
        "related_products": ["SW7005"],
    },
    {
        "reference": "SW7008",
        "name_en": "Alabaster Light",
        "name_fr": "Albâtre Clair",
        "color": "#F5F2EA",
        "price": Decimal("11.99"),
        "allowed_quantities": [1, 5, 10, 20],
        "related_products": ["SW7005", "SW7006"],
    },
]

CUSTOMERS = [
    ("John Doe", "john@example.com"),
    ("Jane Smith", "jane@example.com"),
    ("Bob Wilson", "bob@example.com"),
]

CUSTOMER_PASSWORD = "password123"


class Command(BaseCommand):
    help = "Seed database with a sample paint catalog, users and orders."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        admin = self._seed_admin()
        customers = self._seed_customers()
        products = self._seed_products()
        orders_created = self._seed_orders(admin, customers, products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(customers) + 1}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )
        self.stdout.write(f"Admin: {admin.email}")
        self.stdout.write(f"Customers: {', '.join(u.email for u in customers)}")

    def _seed_admin(self) -> User:
        email = config("ADMIN_EMAIL", default="admin@example.com").lower()
        admin = User.objects.filter(email=email).first()
        if admin is None:
            admin = User.objects.create_superuser(
                email,
                password=config("ADMIN_PASSWORD", default="admin123"),
                name="Admin",
            )
        return admin

    def _seed_customers(self) -> list[User]:
        self.stdout.write("Creating customers...")
        customers: list[User] = []
        for name, email in CUSTOMERS:
            user = User.objects.filter(email=email).first()
            if user is None:
                user = User.objects.create_user(
                    email, password=CUSTOMER_PASSWORD, name=name, role=UserRole.USER
                )
            customers.append(user)

        bob = customers[-1]
        if not bob.password_reset_requests.filter(
            status=ResetRequestStatus.PENDING
        ).exists():
            PasswordResetRequest.objects.create(user=bob)
            User.objects.filter(id=bob.id).update(
                password_reset_requested=True,
                password_reset_requested_at=timezone.now(),
            )
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_products(self) -> dict[str, Product]:
        self.stdout.write("Creating products...")
        products: dict[str, Product] = {}
        for data in CATALOG:
            fields = dict(data)
            reference = fields.pop("reference")
            product, _ = Product.objects.get_or_create(reference=reference, defaults=fields)
            products[reference] = product
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(
        self, admin: User, customers: list[User], products: dict[str, Product]
    ) -> int:
        self.stdout.write("Creating orders...")
        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            catalog_gateway=ProductCatalogGateway(ProductDjangoRepository()),
        )
        john, jane = customers[0], customers[1]

        service.create_order(
            CreateOrderDTO(
                items=[
                    CreateOrderItemDTO(product_id=products["1-405"].id, quantity=10),
                    CreateOrderItemDTO(product_id=products["SW7005"].id, quantity=5),
                ]
            ),
            Actor.from_user(john),
        )
        second = service.create_order(
            CreateOrderDTO(
                items=[CreateOrderItemDTO(product_id=products["8-814"].id, quantity=20)]
            ),
            Actor.from_user(jane),
        )
        service.update_status(second.id, OrderStatus.CONFIRMED, Actor.from_user(admin))

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return 2
