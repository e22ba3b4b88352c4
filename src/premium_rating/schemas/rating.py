# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Pydantic models returned by the rating services.

These models give structure to what the calculator and validator hand back
so that callers never deal with naked tuples or dicts.
"""

from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from beartype import beartype
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from ..models.rating import InsuranceType

__all__ = [
    "PremiumBreakdown",
    "RatingValidationResult",
    "CENTS",
]

CENTS = Decimal("0.01")


class PremiumBreakdown(BaseModel):
    """Explainable decomposition of a calculated premium."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    insurance_type: InsuranceType
    policy_date: date
    base_premium: Decimal = Field(..., gt=Decimal("0"))
    rating_factors: dict[str, Decimal] = Field(
        ..., description="Applied multiplier per factor category, in rating order"
    )
    rating_keys: dict[str, str] = Field(
        default_factory=dict,
        description="Rating key resolved for each factor category",
    )
    final_premium: Decimal = Field(..., ge=Decimal("0"), decimal_places=2)
    discount_surcharge: Decimal = Field(
        default=Decimal("0.00"),
        description="Negative for a discount, positive for a surcharge",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_payable(self) -> Decimal:
        """Final premium adjusted by the discount or surcharge."""
        return (self.final_premium + self.discount_surcharge).quantize(
            CENTS, rounding=ROUND_HALF_UP
        )


class RatingValidationResult(BaseModel):
    """Outcome of a rating validation call.

    Errors block calculation, warnings never do.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_validity_matches_errors(self) -> "RatingValidationResult":
        """A result is valid exactly when it carries no errors."""
        if self.is_valid == bool(self.errors):
            raise ValueError("is_valid must be True if and only if errors is empty")
        return self

    @classmethod
    @beartype
    def from_findings(
        cls, errors: Iterable[str], warnings: Iterable[str]
    ) -> "RatingValidationResult":
        """Build a result whose validity follows from the errors found."""
        error_list = list(errors)
        return cls(is_valid=not error_list, errors=error_list, warnings=list(warnings))

    @property
    def has_errors(self) -> bool:
        """Check whether any error was recorded."""
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        """Check whether any warning was recorded."""
        return bool(self.warnings)
