from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from apps.catalog.models import ProductVariant


class TestProductVariant:

    def test_str_with_color(self):
        variant = ProductVariant(product_name="Lipstick", color_name="Ruby", price_usd=Decimal("12.50"))

        assert str(variant) == "Lipstick / Ruby (USD 12.50)"

    def test_str_without_color(self):
        variant = ProductVariant(product_name="Mascara", price_usd=Decimal("8.00"))

        assert str(variant) == "Mascara (USD 8.00)"

    def test_negative_usd_price_is_invalid(self):
        variant = ProductVariant(product_name="Mascara", price_usd=Decimal("-1.00"))

        with pytest.raises(ValidationError):
            variant.full_clean(validate_unique=False, validate_constraints=False)
