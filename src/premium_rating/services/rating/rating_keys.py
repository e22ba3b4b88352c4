# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rating key derivation.

Maps a vehicle and a policy date onto the canonical rating keys used to look
up multipliers in the rating tables. The mapping is pure: the same vehicle,
date and settings always yield the same keys.

Bands (defaults, configurable through ``RatingSettings``):

    engine capacity  <1000 SMALL | 1000-1599 MEDIUM | 1600-1999 LARGE | >=2000 XLARGE
    power            <75 LOW     | 75-149 MEDIUM    | 150-249 HIGH    | >=250 VERY_HIGH
    vehicle age      VEHICLE_AGE_0 .. VEHICLE_AGE_10 (older vehicles share age 10)
"""

from datetime import date

from beartype import beartype

from ...core.config import RatingSettings, get_settings
from ...models.rating import InsuranceType
from ...models.vehicle import Vehicle

VEHICLE_AGE_CATEGORY = "VEHICLE_AGE"
ENGINE_CAPACITY_CATEGORY = "ENGINE_CAPACITY"
POWER_CATEGORY = "POWER"

ENGINE_KEYS = ("ENGINE_SMALL", "ENGINE_MEDIUM", "ENGINE_LARGE", "ENGINE_XLARGE")
POWER_KEYS = ("POWER_LOW", "POWER_MEDIUM", "POWER_HIGH", "POWER_VERY_HIGH")

COVERAGE_KEYS: dict[InsuranceType, str] = {
    InsuranceType.OC: "OC_STANDARD",
    InsuranceType.AC: "AC_COMPREHENSIVE",
    InsuranceType.NNW: "NNW_STANDARD",
}


@beartype
def coverage_category(insurance_type: InsuranceType) -> str:
    """Breakdown label of the coverage factor, e.g. ``OC_COVERAGE``."""
    return f"{insurance_type.value}_COVERAGE"


@beartype
def _band_index(value: int, bounds: tuple[int, int, int]) -> int:
    for index, lower_bound in enumerate(bounds):
        if value < lower_bound:
            return index
    return len(bounds)


@beartype
class RatingKeyDeriver:
    """Derive rating keys from vehicle attributes."""

    def __init__(self, settings: RatingSettings | None = None) -> None:
        """Initialize deriver with band configuration."""
        self._settings = settings or get_settings()

    @beartype
    def vehicle_age_key(self, vehicle: Vehicle, policy_date: date) -> str:
        """Age bucket key, capped at the configured maximum age."""
        age = min(vehicle.age_on(policy_date), self._settings.max_rated_vehicle_age)
        return f"VEHICLE_AGE_{age}"

    @beartype
    def engine_capacity_key(self, engine_capacity: int) -> str:
        """Engine capacity bucket key."""
        return ENGINE_KEYS[
            _band_index(engine_capacity, self._settings.engine_capacity_bands)
        ]

    @beartype
    def power_key(self, power: int) -> str:
        """Power bucket key."""
        return POWER_KEYS[_band_index(power, self._settings.power_bands)]

    @beartype
    def coverage_key(self, insurance_type: InsuranceType) -> str:
        """Coverage key fixed per insurance type."""
        return COVERAGE_KEYS[insurance_type]

    @beartype
    def derive(
        self,
        insurance_type: InsuranceType,
        vehicle: Vehicle,
        policy_date: date,
    ) -> dict[str, str]:
        """Derive all rating keys in rating order.

        Returns:
            Mapping of factor category to rating key: vehicle age, engine
            capacity, power, then coverage.
        """
        return {
            VEHICLE_AGE_CATEGORY: self.vehicle_age_key(vehicle, policy_date),
            ENGINE_CAPACITY_CATEGORY: self.engine_capacity_key(
                vehicle.engine_capacity
            ),
            POWER_CATEGORY: self.power_key(vehicle.power),
            coverage_category(insurance_type): self.coverage_key(insurance_type),
        }
