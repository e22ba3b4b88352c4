# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rating configuration using Pydantic Settings.

Every business threshold the rating engine relies on lives here so that it
can be tuned per environment (``RATING_*`` variables) without code changes.
"""

from decimal import Decimal

from beartype import beartype
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RatingSettings(BaseSettings):
    """Rating engine settings with immutable configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RATING_",
        env_file=None,
        env_file_encoding="utf-8",
        frozen=True,
        validate_default=True,
        extra="forbid",
    )

    # Base premiums per insurance type
    base_premiums: dict[str, Decimal] = Field(
        default_factory=lambda: {
            "OC": Decimal("800.00"),
            "AC": Decimal("1200.00"),
            "NNW": Decimal("300.00"),
        },
        description="Base premium per insurance type before rating factors",
    )
    fallback_base_premium: Decimal = Field(
        default=Decimal("500.00"),
        gt=Decimal("0"),
        description="Base premium used for a type missing from base_premiums",
    )

    # Rating key bands (lower bound of MEDIUM, LARGE/HIGH, XLARGE/VERY_HIGH)
    engine_capacity_bands: tuple[int, int, int] = Field(
        default=(1000, 1600, 2000),
        description="Engine capacity (cc) lower bounds of the upper three bands",
    )
    power_bands: tuple[int, int, int] = Field(
        default=(75, 150, 250),
        description="Power (hp) lower bounds of the upper three bands",
    )
    max_rated_vehicle_age: int = Field(
        default=10,
        ge=0,
        le=50,
        description="Vehicle age bucket ceiling; older vehicles share this bucket",
    )

    # Rating table multiplier bounds
    min_multiplier: Decimal = Field(
        default=Decimal("0.1000"),
        gt=Decimal("0"),
        description="Multipliers below this value are rejected",
    )
    suspicious_multiplier: Decimal = Field(
        default=Decimal("5.0000"),
        gt=Decimal("0"),
        description="Multipliers above this value are flagged for review",
    )
    max_multiplier: Decimal = Field(
        default=Decimal("10.0000"),
        gt=Decimal("0"),
        description="Absolute multiplier ceiling; anything above is rejected",
    )

    # Vehicle plausibility
    min_engine_capacity: int = Field(default=50, ge=0)
    max_engine_capacity: int = Field(default=8000, ge=1)
    min_power: int = Field(default=10, ge=0)
    max_power: int = Field(default=1500, ge=1)

    # Eligibility and heuristics
    max_vehicle_age_for_ac: int = Field(
        default=15,
        ge=0,
        description="AC coverage is not offered for vehicles older than this",
    )
    ac_small_engine_capacity: int = Field(default=800, ge=0)
    oc_old_vehicle_age: int = Field(default=30, ge=0)
    nnw_old_vehicle_age: int = Field(default=25, ge=0)
    very_old_vehicle_age: int = Field(default=40, ge=0)
    max_policy_years_ahead: int = Field(default=1, ge=0)
    max_policy_years_back: int = Field(default=2, ge=0)
    large_engine_capacity: int = Field(default=3000, ge=0)
    large_engine_low_power: int = Field(default=150, ge=0)
    small_engine_capacity: int = Field(default=1000, ge=0)
    small_engine_high_power: int = Field(default=200, ge=0)

    @field_validator("engine_capacity_bands", "power_bands")
    @classmethod
    def validate_bands(
        cls: type["RatingSettings"], v: tuple[int, int, int]
    ) -> tuple[int, int, int]:
        """Ensure band boundaries are positive and strictly ascending."""
        if v[0] <= 0 or not v[0] < v[1] < v[2]:
            raise ValueError(f"Band boundaries must be positive and ascending: {v}")
        return v

    @field_validator("max_multiplier")
    @classmethod
    def validate_multiplier_bounds(
        cls: type["RatingSettings"], v: Decimal, info: ValidationInfo
    ) -> Decimal:
        """Ensure min <= suspicious <= max multiplier."""
        minimum = info.data.get("min_multiplier")
        suspicious = info.data.get("suspicious_multiplier")
        if minimum is not None and suspicious is not None:
            if not minimum <= suspicious <= v:
                raise ValueError(
                    f"Multiplier bounds must be ordered: min ({minimum}) <= "
                    f"suspicious ({suspicious}) <= max ({v})"
                )
        return v

    @field_validator("base_premiums")
    @classmethod
    def validate_base_premiums(
        cls: type["RatingSettings"], v: dict[str, Decimal]
    ) -> dict[str, Decimal]:
        """Base premiums must be positive."""
        for insurance_type, premium in v.items():
            if premium <= 0:
                raise ValueError(
                    f"Base premium for {insurance_type} must be positive, got {premium}"
                )
        return v

    @beartype
    def base_premium_for(self, insurance_type: str) -> Decimal:
        """Look up the base premium, falling back to the default."""
        return self.base_premiums.get(insurance_type, self.fallback_base_premium)


_settings: RatingSettings | None = None


@beartype
def get_settings() -> RatingSettings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = RatingSettings()
    return _settings


@beartype
def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    global _settings
    _settings = None
