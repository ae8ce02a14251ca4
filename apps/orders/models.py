"""
Order models.
The pricing cascade keeps total_amount_ars in sync with the dollar rate while an
order is still unpaid.
"""

from decimal import Decimal

from django.db import models

from apps.common.models import BaseModel


class OrderStatus(models.TextChoices):

    PENDING_PAYMENT = "pending_payment", "Pending payment"
    PROCESSING = "processing", "Processing"
    ON_HOLD = "on_hold", "On hold"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"


# Orders in these states have not been paid yet, so their ARS total follows the rate.
REPRICEABLE_STATUSES = (
    OrderStatus.PENDING_PAYMENT,
    OrderStatus.ON_HOLD,
)


class Order(BaseModel):

    order_number = models.CharField(max_length=32, unique=True)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING_PAYMENT,
        db_index=True,
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Order total in USD.",
    )
    total_amount_ars = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        null=True,
        blank=True,
    )
    exchange_rate = models.DecimalField(
        max_digits=20,
        decimal_places=8,
        default=Decimal("1"),
        help_text="Effective dollar value last applied to this order.",
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Order {self.order_number} [{self.get_status_display()}]"

    @property
    def is_repriceable(self) -> bool:
        return self.status in REPRICEABLE_STATUSES
