"""Rating engine services package.

This package provides:
- Rating key derivation from vehicle attributes
- The rating fact store contract and an in-memory implementation
- Multiplicative premium calculation with explainable breakdowns
- Business rule validation of rating requests and rating table entries
- Rating table administration
"""

from .business_rules import BusinessRuleViolation, RatingValidator
from .calculators import NEUTRAL_MULTIPLIER, PremiumCalculator
from .fact_store import (
    InMemoryRatingFactStore,
    RatingFactStore,
    WritableRatingFactStore,
)
from .rate_tables import RatingTableService
from .rating_keys import RatingKeyDeriver

__all__ = [
    # Key derivation
    "RatingKeyDeriver",
    # Storage contract
    "RatingFactStore",
    "WritableRatingFactStore",
    "InMemoryRatingFactStore",
    # Calculation
    "PremiumCalculator",
    "NEUTRAL_MULTIPLIER",
    # Validation
    "RatingValidator",
    "BusinessRuleViolation",
    # Administration
    "RatingTableService",
]
