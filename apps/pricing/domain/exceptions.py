"""
Domain exceptions for the pricing bounded context.
"""


class PricingError(Exception):
    """Base class for every pricing failure."""


class SourceUnavailable(PricingError):
    """No configured provider returned a usable dollar rate."""

    def __init__(self, message: str = "All dollar rate providers failed"):
        super().__init__(message)


class MarkupValidationError(PricingError, ValueError):
    """The markup configuration is negative or not a number."""


class RateNotInitialized(PricingError):
    """The dollar rate record does not exist yet."""

    def __init__(self, message: str = "Dollar rate has not been initialized"):
        super().__init__(message)


class PersistenceConflict(PricingError):
    """Another writer created the dollar rate record concurrently."""


class CascadeFailure(PricingError):
    """A bulk price update failed; stage names the table being repriced."""

    def __init__(self, stage: str, cause: Exception | None = None):
        self.stage = stage
        self.cause = cause
        message = f"Price cascade failed while updating {stage}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
