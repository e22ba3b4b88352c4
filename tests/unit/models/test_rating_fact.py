"""Unit tests for rating fact and vehicle domain models."""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from premium_rating.models import InsuranceType, RatingFact, Vehicle, whole_years_between


class TestRatingFactValidity:
    """Validity windows are inclusive on both ends."""

    def test_valid_on_both_boundaries(self, make_fact):
        fact = make_fact(
            "ENGINE_SMALL", valid_from=date(2024, 1, 1), valid_to=date(2024, 12, 31)
        )

        assert fact.is_valid_for_date(date(2024, 1, 1))
        assert fact.is_valid_for_date(date(2024, 12, 31))
        assert not fact.is_valid_for_date(date(2023, 12, 31))
        assert not fact.is_valid_for_date(date(2025, 1, 1))

    def test_open_ended_window(self, make_fact):
        fact = make_fact("ENGINE_SMALL", valid_from=date(2024, 1, 1))

        assert fact.is_valid_for_date(date(2099, 1, 1))
        assert not fact.is_valid_for_date(None)

    def test_current_expired_and_future(self, make_fact, today):
        current = make_fact("POWER_LOW", valid_from=today - timedelta(days=1))
        expired = make_fact(
            "POWER_LOW",
            valid_from=today - timedelta(days=30),
            valid_to=today - timedelta(days=1),
        )
        future = make_fact("POWER_LOW", valid_from=today + timedelta(days=1))

        assert current.is_currently_valid()
        assert not current.is_expired()
        assert expired.is_expired()
        assert not expired.is_currently_valid()
        assert future.is_future_effective()
        assert not future.is_currently_valid()

    def test_overlaps_is_inclusive(self, make_fact):
        fact = make_fact(
            "VEHICLE_AGE_5", valid_from=date(2024, 1, 1), valid_to=date(2024, 6, 30)
        )

        assert fact.overlaps(date(2024, 6, 30), date(2024, 12, 31))
        assert fact.overlaps(date(2023, 1, 1), None)
        assert not fact.overlaps(date(2024, 7, 1), None)
        assert not fact.overlaps(date(2023, 1, 1), date(2023, 12, 31))

    def test_open_ended_fact_overlaps_anything_after_start(self, make_fact):
        fact = make_fact("VEHICLE_AGE_5", valid_from=date(2024, 1, 1))

        assert fact.overlaps(date(2030, 1, 1), date(2030, 1, 31))
        assert not fact.overlaps(date(2022, 1, 1), date(2023, 12, 31))


class TestRatingFactModel:
    """Model constraints and helpers."""

    def test_description(self, make_fact):
        fact = make_fact("ENGINE_SMALL", "0.8500")

        assert fact.description == "OC - ENGINE_SMALL (x0.8500)"
        assert fact.applies_to(InsuranceType.OC)
        assert not fact.applies_to(InsuranceType.AC)

    def test_fact_is_immutable(self, make_fact):
        fact = make_fact("ENGINE_SMALL")

        with pytest.raises(ValidationError):
            fact.multiplier = Decimal("2.0")

    def test_rejects_more_than_four_decimal_places(self):
        with pytest.raises(ValidationError):
            RatingFact(
                insurance_type=InsuranceType.OC,
                rating_key="ENGINE_SMALL",
                multiplier=Decimal("1.12345"),
                valid_from=date(2024, 1, 1),
            )

    def test_inverted_window_is_left_to_the_validator(self):
        fact = RatingFact(
            insurance_type=InsuranceType.AC,
            rating_key="AC_COMPREHENSIVE",
            multiplier=Decimal("1.1"),
            valid_from=date(2025, 1, 1),
            valid_to=date(2024, 1, 1),
        )

        assert fact.valid_from > fact.valid_to

    def test_rating_key_is_stripped_and_required(self):
        fact = RatingFact(
            insurance_type=InsuranceType.NNW,
            rating_key="  NNW_STANDARD  ",
            multiplier=Decimal("1"),
            valid_from=date(2024, 1, 1),
        )
        assert fact.rating_key == "NNW_STANDARD"

        with pytest.raises(ValidationError):
            RatingFact(
                insurance_type=InsuranceType.NNW,
                rating_key="",
                multiplier=Decimal("1"),
                valid_from=date(2024, 1, 1),
            )

    def test_unknown_insurance_type_rejected(self):
        with pytest.raises(ValidationError):
            RatingFact(
                insurance_type="XYZ",
                rating_key="OC_STANDARD",
                multiplier=Decimal("1"),
                valid_from=date(2024, 1, 1),
            )


class TestVehicleAge:
    """Vehicle age counts completed years only."""

    def test_whole_years_counts_anniversary(self):
        registered = date(2014, 6, 15)

        assert whole_years_between(registered, date(2024, 6, 14)) == 9
        assert whole_years_between(registered, date(2024, 6, 15)) == 10

    def test_age_never_negative(self):
        assert whole_years_between(date(2025, 1, 1), date(2024, 1, 1)) == 0

    def test_vehicle_helpers(self, make_vehicle, today, years_before):
        old = make_vehicle(years_before(today, 12))
        new = make_vehicle(today - timedelta(days=10))

        assert old.age_in_years() == 12
        assert old.age_on(years_before(today, 2)) == 10
        assert new.is_new()
        assert not old.is_new()

    def test_negative_engine_capacity_rejected(self):
        with pytest.raises(ValidationError):
            Vehicle(
                make="Fiat",
                model="Panda",
                year_of_manufacture=2015,
                first_registration_date=date(2015, 3, 1),
                engine_capacity=-1,
                power=60,
            )
