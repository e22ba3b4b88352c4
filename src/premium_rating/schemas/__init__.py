"""Result payloads produced by the rating services."""

from .rating import PremiumBreakdown, RatingValidationResult

__all__ = [
    "PremiumBreakdown",
    "RatingValidationResult",
]
