"""
Serializers for the pricing bounded context.
Handles validation and transformation between API and ORM layers.
"""

from decimal import Decimal

from rest_framework import serializers
from drf_spectacular.utils import extend_schema_serializer

from apps.pricing.infrastructure.persistence.models import DollarRate


# Always a single object, including on the list route
@extend_schema_serializer(many=False)
class DollarRateSerializer(serializers.ModelSerializer):
    value = serializers.DecimalField(
        source="effective_value", max_digits=20, decimal_places=8, read_only=True
    )
    added_value = serializers.DecimalField(
        source="markup_value", max_digits=20, decimal_places=8, read_only=True
    )
    is_percentage = serializers.BooleanField(source="markup_is_percentage", read_only=True)
    source = serializers.CharField(source="provider_name", read_only=True)
    api_updated_at = serializers.DateTimeField(source="source_fetched_at", read_only=True)

    class Meta:
        model = DollarRate
        fields = [
            "base_value",
            "value",
            "added_value",
            "is_percentage",
            "source",
            "api_updated_at",
            "updated_at",
        ]
        read_only_fields = fields


class MarkupConfigSerializer(serializers.Serializer):
    added_value = serializers.DecimalField(
        max_digits=20,
        decimal_places=8,
        min_value=Decimal("0"),
    )
    is_percentage = serializers.BooleanField()


class ConversionSerializer(serializers.Serializer):
    amount_usd = serializers.DecimalField(max_digits=20, decimal_places=2)
    rate = serializers.DecimalField(max_digits=20, decimal_places=8)
    amount_ars = serializers.DecimalField(max_digits=24, decimal_places=2)
