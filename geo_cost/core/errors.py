"""
Error taxonomy for cost estimation.

All errors derive from ValueError so callers that only care about
"bad lookup or bad input" can catch a single type.
"""


class PricingError(ValueError):
    """Base class for estimator errors."""


class UnknownModel(PricingError):
    """Raised when a model identifier is absent from the catalog."""
    def __init__(self, model_id: str):
        super().__init__(f"Unknown model: {model_id}")
        self.model_id = model_id


class UnknownFrequency(PricingError):
    """Raised when a cadence key is absent from the frequency table."""
    def __init__(self, key: str):
        super().__init__(f"Unknown frequency: {key}")
        self.key = key


class InvalidInput(PricingError):
    """Raised when calculation input violates its preconditions."""
