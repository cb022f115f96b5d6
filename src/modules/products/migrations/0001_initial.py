from decimal import Decimal

import django.core.validators
import uuid6
from django.db import migrations, models

import modules.products.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("reference", models.CharField(max_length=64, unique=True)),
                ("name_en", models.CharField(max_length=255)),
                ("name_fr", models.CharField(max_length=255)),
                ("size", models.CharField(default="1L", max_length=20)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00"))
                        ],
                    ),
                ),
                ("color", models.CharField(blank=True, default="", max_length=32)),
                (
                    "allowed_quantities",
                    models.JSONField(
                        blank=True,
                        default=modules.products.models.default_allowed_quantities,
                    ),
                ),
                ("related_products", models.JSONField(blank=True, default=list)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "products",
                "ordering": ["reference"],
                "indexes": [
                    models.Index(fields=["is_active"], name="products_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(price__gte=0),
                        name="products_price_non_negative",
                    ),
                ],
            },
        ),
    ]
