"""
Catalog models.
Only the fields the pricing cascade reads and writes live here; the rest of the
product catalog is owned elsewhere.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.common.models import BaseModel


class ProductVariant(BaseModel):

    product_name = models.CharField(max_length=200, db_index=True)
    color_name = models.CharField(max_length=50, blank=True)
    stock = models.PositiveIntegerField(default=0)
    price_usd = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    price_ars = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Derived from price_usd and the effective dollar value at the last cascade.",
    )

    class Meta:
        ordering = ["product_name", "color_name"]

    def __str__(self):
        label = f"{self.product_name} / {self.color_name}" if self.color_name else self.product_name
        return f"{label} (USD {self.price_usd})"
