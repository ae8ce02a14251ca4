"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from apps.pricing.infrastructure.persistence.models import DollarRate


@dataclass
class RefreshResultDTO:
    """Outcome of pulling the rate from the providers."""
    rate: DollarRate
    changed: bool


@dataclass
class MarkupUpdateResultDTO:
    """Outcome of a markup configuration change."""
    rate: DollarRate
    previous_effective_value: Decimal

    @property
    def effective_value_changed(self) -> bool:
        return self.rate.effective_value != self.previous_effective_value


@dataclass
class ConversionResultDTO:
    """Result DTO for USD to ARS conversion."""
    amount_usd: Decimal
    rate: Decimal
    amount_ars: Decimal


@dataclass
class CascadeResultDTO:
    """
    Result of running both price cascades.
    A count is None when its stage failed.
    """
    effective_value: Decimal
    variants_updated: Optional[int] = None
    orders_updated: Optional[int] = None
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass
class SyncResultDTO:
    """Summary of one scheduler tick."""
    stage: str
    changed: bool = False
    effective_value: Optional[Decimal] = None
    variants_updated: Optional[int] = None
    orders_updated: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    message: str = ""

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "stage": self.stage,
            "changed": self.changed,
            "effective_value": str(self.effective_value) if self.effective_value is not None else None,
            "variants_updated": self.variants_updated,
            "orders_updated": self.orders_updated,
            "errors": list(self.errors),
            "message": self.message,
        }
