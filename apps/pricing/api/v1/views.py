"""
ViewSet for the pricing API v1.
Exposes the dollar rate, its markup configuration and the price cascade.
"""

import logging
from decimal import Decimal, InvalidOperation

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.pricing.api.v1.serializers import (
    ConversionSerializer,
    DollarRateSerializer,
    MarkupConfigSerializer,
)
from apps.pricing.application.tasks import cascade_dollar_prices
from apps.pricing.domain.exceptions import (
    MarkupValidationError,
    RateNotInitialized,
    SourceUnavailable,
)
from apps.pricing.domain.services import DollarRateService
from apps.pricing.infrastructure.persistence.repositories import DollarRateRepository

logger = logging.getLogger(__name__)


def _sources_unavailable_response(error: SourceUnavailable) -> Response:
    return Response(
        {"error": f"Dollar rate sources unavailable: {error}"},
        status=status.HTTP_503_SERVICE_UNAVAILABLE
    )


@extend_schema(tags=['Dollar'])
class DollarRateViewSet(viewsets.ViewSet):

    @extend_schema(
        responses=DollarRateSerializer,
        description="Get the current dollar rate. Fetches it from the providers on first use."
    )
    def list(self, request):
        try:
            rate = DollarRateService.get_current_rate()
        except SourceUnavailable as e:
            return _sources_unavailable_response(e)

        return Response(DollarRateSerializer(rate).data)

    @extend_schema(
        request=None,
        responses={200: OpenApiTypes.OBJECT},
        description="Fetch the dollar rate from the providers now. "
                    "When the base value changed, the price cascade is dispatched."
    )
    @action(detail=False, methods=['put'], url_path='update')
    def refresh(self, request):
        try:
            result = DollarRateService.refresh_rate()
        except SourceUnavailable as e:
            return _sources_unavailable_response(e)

        if result.changed:
            task = cascade_dollar_prices.delay()
            logger.info("Dispatched price cascade %s after manual refresh", task.id)

        return Response({
            "changed": result.changed,
            "rate": DollarRateSerializer(result.rate).data,
        })

    @extend_schema(
        request=MarkupConfigSerializer,
        responses=DollarRateSerializer,
        description="Update the markup applied on top of the base dollar rate"
    )
    @action(detail=False, methods=['patch'], url_path='config')
    def config(self, request):
        """
        Update the markup configuration.

        Body:
        - added_value: Non-negative markup (required)
        - is_percentage: Whether added_value is a percentage (required)
        """
        serializer = MarkupConfigSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Invalid markup configuration", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            result = DollarRateService.update_markup_config(
                serializer.validated_data["added_value"],
                serializer.validated_data["is_percentage"],
            )
        except MarkupValidationError as e:
            return Response(
                {"error": str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )
        except RateNotInitialized:
            return Response(
                {"error": "Dollar rate not found. Fetch it before configuring the markup."},
                status=status.HTTP_404_NOT_FOUND
            )

        if result.effective_value_changed:
            task = cascade_dollar_prices.delay()
            logger.info("Dispatched price cascade %s after markup change", task.id)

        return Response(DollarRateSerializer(result.rate).data)

    @extend_schema(
        request=None,
        responses={202: OpenApiTypes.OBJECT},
        description="Re-apply the stored dollar rate to every variant and open order"
    )
    @action(detail=False, methods=['post'], url_path='cascade')
    def cascade(self, request):
        if DollarRateRepository.read() is None:
            return Response(
                {"error": "Dollar rate not found. Fetch it before cascading prices."},
                status=status.HTTP_404_NOT_FOUND
            )

        task = cascade_dollar_prices.delay()
        return Response(
            {"task_id": task.id, "message": "Price cascade dispatched"},
            status=status.HTTP_202_ACCEPTED
        )

    @extend_schema(
        parameters=[
            OpenApiParameter("amount", OpenApiTypes.DECIMAL, required=True, description="Amount in USD"),
        ],
        responses=ConversionSerializer,
        description="Convert a USD amount to ARS with the current effective dollar value"
    )
    @action(detail=False, methods=['get'], url_path='convert')
    def convert(self, request):
        amount_str = request.query_params.get('amount')

        if not amount_str:
            return Response(
                {"error": "amount is required"},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            amount = Decimal(amount_str)
        except (InvalidOperation, ValueError):
            return Response(
                {"error": "Invalid amount. Must be a number"},
                status=status.HTTP_400_BAD_REQUEST
            )

        if not amount.is_finite() or amount <= 0:
            return Response(
                {"error": "Amount must be positive"},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            result = DollarRateService.convert_to_ars(amount)
        except SourceUnavailable as e:
            return _sources_unavailable_response(e)

        return Response(ConversionSerializer(result).data)
