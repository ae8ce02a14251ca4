import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProductVariant",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product_name", models.CharField(db_index=True, max_length=200)),
                ("color_name", models.CharField(blank=True, max_length=50)),
                ("stock", models.PositiveIntegerField(default=0)),
                (
                    "price_usd",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "price_ars",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Derived from price_usd and the effective dollar value at the last cascade.",
                        max_digits=16,
                        null=True,
                    ),
                ),
            ],
            options={
                "ordering": ["product_name", "color_name"],
            },
        ),
    ]
