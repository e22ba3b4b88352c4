# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rating fact domain model.

A rating fact is one row of a rating table: the multiplier applied to a
rating key of an insurance type during an inclusive validity window.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from beartype import beartype
from pydantic import Field

from .base import BaseModelConfig


class InsuranceType(str, Enum):
    """Types of motor insurance offered."""

    OC = "OC"  # Obligatory civil liability, mandatory by law
    AC = "AC"  # Autocasco, comprehensive own-damage cover
    NNW = "NNW"  # Personal accident cover


@beartype
class RatingFact(BaseModelConfig):
    """Time-bounded multiplier for one rating key.

    Bounds on the multiplier and ordering of the validity dates are checked
    by the rating validator, not here, so that a bad candidate can still be
    reported on instead of failing at construction.
    """

    id: UUID = Field(default_factory=uuid4)
    insurance_type: InsuranceType = Field(...)
    rating_key: str = Field(..., min_length=1, max_length=100)
    multiplier: Decimal = Field(..., decimal_places=4)
    valid_from: date = Field(..., description="First day the fact applies")
    valid_to: date | None = Field(
        None, description="Last day the fact applies, open-ended when empty"
    )

    @beartype
    def is_valid_for_date(self, on: date | None) -> bool:
        """Check whether the validity window contains the given date."""
        if on is None:
            return False
        if on < self.valid_from:
            return False
        return self.valid_to is None or on <= self.valid_to

    @beartype
    def is_currently_valid(self) -> bool:
        """Check whether the fact applies today."""
        return self.is_valid_for_date(date.today())

    @beartype
    def is_expired(self) -> bool:
        """Check whether the validity window ended before today."""
        return self.valid_to is not None and date.today() > self.valid_to

    @beartype
    def is_future_effective(self) -> bool:
        """Check whether the validity window starts after today."""
        return date.today() < self.valid_from

    @beartype
    def applies_to(self, insurance_type: InsuranceType) -> bool:
        """Check whether the fact belongs to the given insurance type."""
        return self.insurance_type == insurance_type

    @beartype
    def overlaps(self, valid_from: date, valid_to: date | None) -> bool:
        """Check whether the window intersects ``[valid_from, valid_to]``.

        Both windows are inclusive and ``None`` means open-ended.
        """
        starts_before_other_ends = valid_to is None or self.valid_from <= valid_to
        other_starts_before_end = self.valid_to is None or valid_from <= self.valid_to
        return starts_before_other_ends and other_starts_before_end

    @property
    def description(self) -> str:
        """Human-readable summary for listings and logs."""
        return f"{self.insurance_type.value} - {self.rating_key} (x{self.multiplier})"
