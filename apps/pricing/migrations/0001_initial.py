import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DollarRate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("key", models.CharField(default="usd_ars", editable=False, max_length=20, unique=True)),
                ("base_value", models.DecimalField(decimal_places=8, max_digits=20)),
                (
                    "markup_value",
                    models.DecimalField(
                        decimal_places=8,
                        default=Decimal("0"),
                        max_digits=20,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("markup_is_percentage", models.BooleanField(default=False)),
                ("effective_value", models.DecimalField(decimal_places=8, max_digits=20)),
                (
                    "provider_name",
                    models.CharField(
                        choices=[("bluelytics", "Bluelytics"), ("dolarapi", "DolarApi")],
                        max_length=20,
                    ),
                ),
                (
                    "source_fetched_at",
                    models.DateTimeField(help_text="Timestamp reported by the provider for this rate."),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="dollarrate",
            constraint=models.CheckConstraint(
                condition=models.Q(markup_value__gte=0),
                name="dollar_rate_markup_non_negative",
            ),
        ),
    ]
