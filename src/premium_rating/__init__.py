"""Premium rating engine for motor insurance.

Public entry points::

    from premium_rating import PremiumCalculator, RatingValidator
"""

from .core.exceptions import InvalidArgumentError, PremiumCalculationError
from .models import InsuranceType, RatingFact, Vehicle
from .schemas import PremiumBreakdown, RatingValidationResult
from .services.rating import (
    InMemoryRatingFactStore,
    PremiumCalculator,
    RatingFactStore,
    RatingKeyDeriver,
    RatingTableService,
    RatingValidator,
    WritableRatingFactStore,
)

__version__ = "0.1.0"

__all__ = [
    "InsuranceType",
    "RatingFact",
    "Vehicle",
    "PremiumBreakdown",
    "RatingValidationResult",
    "RatingKeyDeriver",
    "RatingFactStore",
    "WritableRatingFactStore",
    "InMemoryRatingFactStore",
    "PremiumCalculator",
    "RatingValidator",
    "RatingTableService",
    "InvalidArgumentError",
    "PremiumCalculationError",
]
