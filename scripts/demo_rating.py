#!/usr/bin/env python3
"""Demonstration script for the premium rating engine."""

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Ensure project root's `src` directory is on the import path when running directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from premium_rating import (
    InMemoryRatingFactStore,
    InsuranceType,
    PremiumCalculator,
    RatingFact,
    RatingTableService,
    RatingValidator,
    Vehicle,
)

RATING_TABLE = {
    "VEHICLE_AGE_0": "0.9000",
    "ENGINE_SMALL": "0.8500",
    "POWER_LOW": "0.9000",
    "OC_STANDARD": "1.0000",
    "AC_COMPREHENSIVE": "1.1000",
}


def seed_store() -> InMemoryRatingFactStore:
    """Load a small rating table through the admin service."""
    print("=== Rating Table Demo ===")

    store = InMemoryRatingFactStore()
    service = RatingTableService(store)

    for rating_key, multiplier in RATING_TABLE.items():
        insurance_type = (
            InsuranceType.AC if rating_key.startswith("AC_") else InsuranceType.OC
        )
        result = service.save_rating_fact(
            RatingFact(
                insurance_type=insurance_type,
                rating_key=rating_key,
                multiplier=Decimal(multiplier),
                valid_from=date(2024, 1, 1),
            )
        )
        if result.is_ok():
            print(f"✓ Stored {result.unwrap().description}")
        else:
            print(f"✗ {result.unwrap_err()}")

    rejected = service.save_rating_fact(
        RatingFact(
            insurance_type=InsuranceType.OC,
            rating_key="ENGINE_LARGE",
            multiplier=Decimal("0.0500"),
            valid_from=date(2024, 1, 1),
        )
    )
    print(f"✗ {rejected.unwrap_err()}")
    return store


def demo_premium_calculation(store: InMemoryRatingFactStore, vehicle: Vehicle) -> None:
    """Rate a small new car for OC and AC."""
    print("\n=== Premium Calculation Demo ===")

    calculator = PremiumCalculator(store)
    for insurance_type in (InsuranceType.OC, InsuranceType.AC):
        breakdown = calculator.calculate_premium_breakdown(
            insurance_type, vehicle, date(2024, 6, 1)
        )
        print(f"{insurance_type.value}: base ${breakdown.base_premium}")
        for category, multiplier in breakdown.rating_factors.items():
            print(f"  {category:<16} {breakdown.rating_keys[category]:<18} x{multiplier}")
        print(f"  FINAL PREMIUM: ${breakdown.final_premium}")


def demo_validation(store: InMemoryRatingFactStore, vehicle: Vehicle) -> None:
    """Show how validation is stricter than calculation."""
    print("\n=== Validation Demo ===")

    validator = RatingValidator(store)
    for insurance_type in (InsuranceType.OC, InsuranceType.NNW):
        result = validator.validate_rating_factors(
            insurance_type, vehicle, date(2024, 6, 1)
        )
        status = "valid" if result.is_valid else "invalid"
        print(f"{insurance_type.value}: {status}")
        for error in result.errors:
            print(f"  error:   {error}")
        for warning in result.warnings:
            print(f"  warning: {warning}")


if __name__ == "__main__":
    print("🚀 Premium Rating Engine Demo")
    print("=" * 50)

    city_car = Vehicle(
        make="Fiat",
        model="Panda",
        year_of_manufacture=2024,
        first_registration_date=date(2024, 3, 1),
        engine_capacity=998,
        power=68,
    )

    rating_store = seed_store()
    demo_premium_calculation(rating_store, city_car)
    demo_validation(rating_store, city_car)
