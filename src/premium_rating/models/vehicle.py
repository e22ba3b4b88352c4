# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Vehicle domain model as seen by the rating engine."""

from datetime import date

from beartype import beartype
from pydantic import Field

from .base import BaseModelConfig


@beartype
def whole_years_between(start: date, end: date) -> int:
    """Count completed years from ``start`` to ``end``, never below zero."""
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return max(years, 0)


@beartype
class Vehicle(BaseModelConfig):
    """Rated vehicle attributes."""

    make: str = Field(..., min_length=1, max_length=50)
    model: str = Field(..., min_length=1, max_length=50)
    year_of_manufacture: int = Field(..., ge=1886, le=2100)
    first_registration_date: date = Field(...)
    engine_capacity: int = Field(..., ge=0, description="Engine capacity in cc")
    power: int = Field(..., ge=0, description="Engine power in hp")
    registration_number: str | None = Field(None, max_length=20)
    vin: str | None = Field(None, min_length=17, max_length=17)

    @beartype
    def age_on(self, on: date) -> int:
        """Vehicle age in whole years since first registration."""
        return whole_years_between(self.first_registration_date, on)

    @beartype
    def age_in_years(self) -> int:
        """Vehicle age in whole years as of today."""
        return self.age_on(date.today())

    @beartype
    def is_new(self) -> bool:
        """A vehicle registered less than a year ago is considered new."""
        return self.age_in_years() < 1
