"""Test configuration and fixtures for the premium rating engine.

Provides settings isolation, vehicle and rating fact factories, and rating
fact stores pre-loaded with complete rating tables.
"""

from collections.abc import Callable, Generator
from datetime import date
from decimal import Decimal

import pytest

from premium_rating.core.config import RatingSettings, clear_settings_cache
from premium_rating.models import InsuranceType, RatingFact, Vehicle
from premium_rating.services.rating import InMemoryRatingFactStore

VehicleFactory = Callable[..., Vehicle]
FactFactory = Callable[..., RatingFact]

RATING_TABLE_START = date(2020, 1, 1)


def shift_years(on: date, years: int) -> date:
    """Same calendar day ``years`` later or earlier (Feb 29 becomes Feb 28)."""
    try:
        return on.replace(year=on.year + years)
    except ValueError:
        return on.replace(year=on.year + years, day=28)


@pytest.fixture(autouse=True)
def isolated_settings() -> Generator[None, None, None]:
    """Make sure cached settings never leak between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> RatingSettings:
    """Default rating settings."""
    return RatingSettings()


@pytest.fixture
def today() -> date:
    """Today's date, for rules evaluated against the current date."""
    return date.today()


@pytest.fixture
def policy_date() -> date:
    """Fixed policy date for calculation tests."""
    return date(2024, 6, 1)


@pytest.fixture
def years_before() -> Callable[[date, int], date]:
    """Date helper: the same day ``n`` years before ``on``."""
    return lambda on, n: shift_years(on, -n)


@pytest.fixture
def make_vehicle() -> VehicleFactory:
    """Factory for vehicles with sensible defaults."""

    def _make(
        first_registration_date: date,
        engine_capacity: int = 1400,
        power: int = 100,
        make: str = "Toyota",
        model: str = "Corolla",
    ) -> Vehicle:
        return Vehicle(
            make=make,
            model=model,
            year_of_manufacture=first_registration_date.year,
            first_registration_date=first_registration_date,
            engine_capacity=engine_capacity,
            power=power,
        )

    return _make


@pytest.fixture
def make_fact() -> FactFactory:
    """Factory for rating facts with sensible defaults."""

    def _make(
        rating_key: str,
        multiplier: str | Decimal = "1.0000",
        insurance_type: InsuranceType = InsuranceType.OC,
        valid_from: date = RATING_TABLE_START,
        valid_to: date | None = None,
    ) -> RatingFact:
        return RatingFact(
            insurance_type=insurance_type,
            rating_key=rating_key,
            multiplier=Decimal(multiplier),
            valid_from=valid_from,
            valid_to=valid_to,
        )

    return _make


@pytest.fixture
def store() -> InMemoryRatingFactStore:
    """Empty rating fact store."""
    return InMemoryRatingFactStore()


@pytest.fixture
def complete_store(make_fact: FactFactory) -> InMemoryRatingFactStore:
    """Store holding an open-ended rating table for every key and type."""
    keys = [f"VEHICLE_AGE_{age}" for age in range(11)]
    keys += ["ENGINE_SMALL", "ENGINE_MEDIUM", "ENGINE_LARGE", "ENGINE_XLARGE"]
    keys += ["POWER_LOW", "POWER_MEDIUM", "POWER_HIGH", "POWER_VERY_HIGH"]
    coverage = {
        InsuranceType.OC: "OC_STANDARD",
        InsuranceType.AC: "AC_COMPREHENSIVE",
        InsuranceType.NNW: "NNW_STANDARD",
    }

    facts = []
    for insurance_type, coverage_key in coverage.items():
        for key in [*keys, coverage_key]:
            facts.append(make_fact(key, "1.0000", insurance_type))
    return InMemoryRatingFactStore(facts)
