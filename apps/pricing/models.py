# Django discovers app models through this module.
from apps.pricing.infrastructure.persistence.models import DollarRate  # noqa: F401
