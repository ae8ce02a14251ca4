"""
Django ORM models for persistence.
Infrastructure layer: technical storage detail.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.common.models import BaseModel

DOLLAR_RATE_KEY = "usd_ars"


class ProviderName(models.TextChoices):
    """
    Enum with available dollar rate providers.
    To add a new provider:
    1. Add an entry here
    2. Implement the BaseDollarRateProvider interface
    3. Register in PROVIDER_REGISTRY (providers/registry.py)
    """

    BLUELYTICS = "bluelytics", "Bluelytics"
    DOLARAPI = "dolarapi", "DolarApi"


class DollarRate(BaseModel):
    """
    The single shared USD to ARS rate.
    Always addressed through DOLLAR_RATE_KEY; the unique key keeps it a singleton.
    """

    key = models.CharField(max_length=20, unique=True, default=DOLLAR_RATE_KEY, editable=False)
    base_value = models.DecimalField(max_digits=20, decimal_places=8)
    markup_value = models.DecimalField(
        max_digits=20,
        decimal_places=8,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    markup_is_percentage = models.BooleanField(default=False)
    effective_value = models.DecimalField(max_digits=20, decimal_places=8)
    provider_name = models.CharField(max_length=20, choices=ProviderName.choices)
    source_fetched_at = models.DateTimeField(
        help_text="Timestamp reported by the provider for this rate.",
    )

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(markup_value__gte=0),
                name="dollar_rate_markup_non_negative",
            )
        ]

    def __str__(self):
        suffix = "%" if self.markup_is_percentage else ""
        return (
            f"USD/ARS {self.effective_value} "
            f"(base {self.base_value} + {self.markup_value}{suffix}, {self.get_provider_name_display()})"
        )
