# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Business rule validation for rating tables and rating requests.

Two independent checks live here:

- ``validate_rating_factors`` runs before a premium is requested and checks
  that the vehicle is plausible, eligible for the insurance type and fully
  covered by the rating tables on the policy date.
- ``validate_rating_table`` runs before a rating fact is stored and checks
  the multiplier, the validity window, overlaps with stored facts and the
  rating key naming convention.

Validation is stricter than calculation: a missing rating fact is an error
here even though the calculator silently falls back to a neutral multiplier.
"""

from datetime import date
from typing import Any

from beartype import beartype

from ...core.config import RatingSettings, get_settings
from ...core.logging_utils import get_logger
from ...models.rating import InsuranceType, RatingFact
from ...models.vehicle import Vehicle
from ...schemas.rating import RatingValidationResult
from .calculators import require_arguments
from .fact_store import RatingFactStore, window_order
from .rating_keys import RatingKeyDeriver

MISSING_FACTOR_PREFIX = "Missing rating factor"
INVALID_FACTOR_PREFIX = "Invalid rating factor"
LOOKUP_FAILED_PREFIX = "Rating table lookup failed"

# Findings that make a premium calculation impossible or certain to fail
CALCULATION_BLOCKING_PREFIXES = (
    MISSING_FACTOR_PREFIX,
    INVALID_FACTOR_PREFIX,
    LOOKUP_FAILED_PREFIX,
)

RECOGNIZED_KEY_PREFIXES = (
    "VEHICLE_AGE_",
    "ENGINE_",
    "POWER_",
    "REGION_",
    "SEASONAL_",
    "OC_",
    "AC_",
    "NNW_",
    "HISTORICAL_",
    "FUTURE_",
)

TYPE_KEY_PREFIXES: dict[InsuranceType, str] = {
    insurance_type: f"{insurance_type.value}_" for insurance_type in InsuranceType
}

logger = get_logger(__name__)


@beartype
class BusinessRuleViolation:
    """Represents a business rule violation."""

    def __init__(
        self,
        rule_id: str,
        severity: str,  # "error" or "warning"
        message: str,
        field: str | None = None,
    ):
        """Initialize business rule violation.

        Args:
            rule_id: Unique identifier for the rule
            severity: Severity level of the violation
            message: Human-readable description
            field: Field that caused the violation
        """
        self.rule_id = rule_id
        self.severity = severity
        self.message = message
        self.field = field

    @property
    def is_error(self) -> bool:
        """Errors block calculation, everything else is advisory."""
        return self.severity == "error"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "rule_id": self.rule_id,
            "severity": self.severity,
            "message": self.message,
            "field": self.field,
        }

    def __repr__(self) -> str:
        return f"BusinessRuleViolation({self.rule_id!r}, {self.severity!r}, {self.message!r})"


def _error(rule_id: str, message: str, field: str | None = None) -> BusinessRuleViolation:
    return BusinessRuleViolation(rule_id, "error", message, field)


def _warning(rule_id: str, message: str, field: str | None = None) -> BusinessRuleViolation:
    return BusinessRuleViolation(rule_id, "warning", message, field)


@beartype
def to_validation_result(
    violations: list[BusinessRuleViolation],
) -> RatingValidationResult:
    """Split violations into errors and warnings, keeping their order."""
    return RatingValidationResult.from_findings(
        errors=[v.message for v in violations if v.is_error],
        warnings=[v.message for v in violations if not v.is_error],
    )


@beartype
class RatingValidator:
    """Validation of rating requests and rating table entries."""

    def __init__(
        self,
        store: RatingFactStore,
        settings: RatingSettings | None = None,
        key_deriver: RatingKeyDeriver | None = None,
    ) -> None:
        """Initialize validator with the store used for coverage and overlap checks."""
        self._store = store
        self._settings = settings or get_settings()
        self._key_deriver = key_deriver or RatingKeyDeriver(self._settings)

    # ------------------------------------------------------------------
    # Rating requests
    # ------------------------------------------------------------------

    @beartype
    def validate_rating_factors(
        self,
        insurance_type: InsuranceType | None,
        vehicle: Vehicle | None,
        policy_date: date | None,
    ) -> RatingValidationResult:
        """Check whether a premium can be rated for the vehicle and date.

        Raises:
            InvalidArgumentError: if any argument is None
        """
        require_arguments(
            insurance_type=insurance_type, vehicle=vehicle, policy_date=policy_date
        )

        violations: list[BusinessRuleViolation] = []
        violations.extend(self._validate_vehicle_characteristics(vehicle))
        violations.extend(
            self._validate_insurance_type_rules(insurance_type, vehicle, policy_date)
        )
        violations.extend(
            self._validate_rating_table_availability(
                insurance_type, vehicle, policy_date
            )
        )
        violations.extend(self._validate_heuristics(vehicle, policy_date))

        return to_validation_result(violations)

    @beartype
    def can_calculate_premium(
        self,
        insurance_type: InsuranceType | None,
        vehicle: Vehicle | None,
        policy_date: date | None,
    ) -> bool:
        """True when every rating factor can be resolved on the policy date.

        Eligibility errors do not count: the calculator rates ineligible
        vehicles, it only fails on an unreadable or corrupt rating table.
        """
        result = self.validate_rating_factors(insurance_type, vehicle, policy_date)
        return not any(
            e.startswith(CALCULATION_BLOCKING_PREFIXES) for e in result.errors
        )

    @beartype
    def get_missing_rating_factors(
        self,
        insurance_type: InsuranceType | None,
        vehicle: Vehicle | None,
        policy_date: date | None,
    ) -> list[str]:
        """Rating keys with no covering fact on the policy date.

        A key whose lookup fails counts as missing.
        """
        require_arguments(
            insurance_type=insurance_type, vehicle=vehicle, policy_date=policy_date
        )
        rating_keys = self._key_deriver.derive(insurance_type, vehicle, policy_date)
        return [
            key
            for key in rating_keys.values()
            if not self._lookup_facts(insurance_type, key, policy_date)[0]
        ]

    @beartype
    def _lookup_facts(
        self, insurance_type: InsuranceType, rating_key: str, policy_date: date
    ) -> tuple[list[RatingFact], BusinessRuleViolation | None]:
        """Covering facts, or no facts and a finding when the store fails."""
        try:
            return self._store.facts_for(insurance_type, rating_key, policy_date), None
        except Exception as e:
            logger.error("Rating fact lookup failed for %s: %s", rating_key, e)
            return [], _error(
                "RATING_TABLE_UNAVAILABLE",
                f"{LOOKUP_FAILED_PREFIX} for {rating_key}: {e}",
                "rating_key",
            )

    @beartype
    def _validate_vehicle_characteristics(
        self, vehicle: Vehicle
    ) -> list[BusinessRuleViolation]:
        """Engine, power and registration date must be physically plausible."""
        s = self._settings
        violations = []

        if vehicle.engine_capacity < s.min_engine_capacity:
            violations.append(
                _error(
                    "ENGINE_CAPACITY_MIN",
                    f"Engine capacity {vehicle.engine_capacity}cc is below minimum {s.min_engine_capacity}cc",
                    "engine_capacity",
                )
            )
        if vehicle.engine_capacity > s.max_engine_capacity:
            violations.append(
                _error(
                    "ENGINE_CAPACITY_MAX",
                    f"Engine capacity {vehicle.engine_capacity}cc exceeds maximum {s.max_engine_capacity}cc",
                    "engine_capacity",
                )
            )
        if vehicle.power < s.min_power:
            violations.append(
                _error(
                    "POWER_MIN",
                    f"Power {vehicle.power}HP is below minimum {s.min_power}HP",
                    "power",
                )
            )
        if vehicle.power > s.max_power:
            violations.append(
                _error(
                    "POWER_MAX",
                    f"Power {vehicle.power}HP exceeds maximum {s.max_power}HP",
                    "power",
                )
            )
        if vehicle.first_registration_date > date.today():
            violations.append(
                _error(
                    "REGISTRATION_IN_FUTURE",
                    "First registration date cannot be in the future",
                    "first_registration_date",
                )
            )

        return violations

    @beartype
    def _validate_insurance_type_rules(
        self,
        insurance_type: InsuranceType,
        vehicle: Vehicle,
        policy_date: date,
    ) -> list[BusinessRuleViolation]:
        """Eligibility rules specific to each insurance type."""
        s = self._settings
        vehicle_age = vehicle.age_on(policy_date)
        violations = []

        if insurance_type == InsuranceType.AC:
            if vehicle_age > s.max_vehicle_age_for_ac:
                violations.append(
                    _error(
                        "AC_VEHICLE_TOO_OLD",
                        f"AC insurance is not available for vehicles older than {s.max_vehicle_age_for_ac} years",
                        "first_registration_date",
                    )
                )
            if vehicle.engine_capacity < s.ac_small_engine_capacity:
                violations.append(
                    _warning(
                        "AC_SMALL_ENGINE",
                        "AC insurance for very small engines may have limited coverage options",
                        "engine_capacity",
                    )
                )
        elif insurance_type == InsuranceType.OC:
            # OC is mandatory, old vehicles stay eligible
            if vehicle_age > s.oc_old_vehicle_age:
                violations.append(
                    _warning(
                        "OC_OLD_VEHICLE",
                        "Very old vehicles may have limited OC coverage options",
                        "first_registration_date",
                    )
                )
        elif insurance_type == InsuranceType.NNW:
            if vehicle_age > s.nnw_old_vehicle_age:
                violations.append(
                    _warning(
                        "NNW_OLD_VEHICLE",
                        "NNW insurance for very old vehicles may have different terms",
                        "first_registration_date",
                    )
                )

        return violations

    @beartype
    def _validate_rating_table_availability(
        self,
        insurance_type: InsuranceType,
        vehicle: Vehicle,
        policy_date: date,
    ) -> list[BusinessRuleViolation]:
        """Every derived rating key must be covered by exactly one fact."""
        violations = []
        rating_keys = self._key_deriver.derive(insurance_type, vehicle, policy_date)

        for rating_key in rating_keys.values():
            facts, lookup_failure = self._lookup_facts(
                insurance_type, rating_key, policy_date
            )
            if lookup_failure is not None:
                violations.append(lookup_failure)
                continue

            if not facts:
                violations.append(
                    _error(
                        "RATING_FACTOR_MISSING",
                        f"{MISSING_FACTOR_PREFIX}: {rating_key} for {insurance_type.value} insurance on {policy_date.isoformat()}",
                        "rating_key",
                    )
                )
                continue

            applied = min(facts, key=window_order)
            if applied.multiplier <= 0:
                violations.append(
                    _error(
                        "RATING_FACTOR_INVALID",
                        f"{INVALID_FACTOR_PREFIX}: {rating_key} has non-positive multiplier {applied.multiplier}",
                        "multiplier",
                    )
                )
            if len(facts) > 1:
                violations.append(
                    _warning(
                        "RATING_FACTOR_AMBIGUOUS",
                        f"Multiple rating entries found for factor: {rating_key}, using the earliest one",
                        "rating_key",
                    )
                )

        return violations

    @beartype
    def _validate_heuristics(
        self, vehicle: Vehicle, policy_date: date
    ) -> list[BusinessRuleViolation]:
        """Advisory checks that never block calculation."""
        s = self._settings
        today = date.today()
        violations = []

        if policy_date > _shift_years(today, s.max_policy_years_ahead):
            violations.append(
                _warning(
                    "POLICY_DATE_FAR_FUTURE",
                    f"Policy date is more than {s.max_policy_years_ahead} year(s) in the future, rating factors may not be accurate",
                    "policy_date",
                )
            )
        if policy_date < _shift_years(today, -s.max_policy_years_back):
            violations.append(
                _warning(
                    "POLICY_DATE_FAR_PAST",
                    f"Policy date is more than {s.max_policy_years_back} year(s) in the past, using historical rating factors",
                    "policy_date",
                )
            )

        if (
            vehicle.engine_capacity > s.large_engine_capacity
            and vehicle.power < s.large_engine_low_power
        ):
            violations.append(
                _warning(
                    "UNUSUAL_LARGE_ENGINE_LOW_POWER",
                    "Unusual combination: large engine capacity with low power output",
                )
            )
        if (
            vehicle.engine_capacity < s.small_engine_capacity
            and vehicle.power > s.small_engine_high_power
        ):
            violations.append(
                _warning(
                    "UNUSUAL_SMALL_ENGINE_HIGH_POWER",
                    "Unusual combination: small engine capacity with high power output",
                )
            )

        vehicle_age = vehicle.age_on(policy_date)
        if vehicle_age > s.very_old_vehicle_age:
            violations.append(
                _warning(
                    "VEHICLE_VERY_OLD",
                    f"Vehicle is very old ({vehicle_age} years), premium calculation may not be accurate",
                    "first_registration_date",
                )
            )

        return violations

    # ------------------------------------------------------------------
    # Rating table entries
    # ------------------------------------------------------------------

    @beartype
    def validate_rating_table(
        self, candidate: RatingFact | None
    ) -> RatingValidationResult:
        """Check a rating fact before it is stored.

        Raises:
            InvalidArgumentError: if the candidate is None
        """
        require_arguments(rating_fact=candidate)

        violations: list[BusinessRuleViolation] = []
        violations.extend(self._validate_multiplier(candidate))
        violations.extend(self._validate_validity_window(candidate))
        violations.extend(self._validate_overlaps(candidate))
        violations.extend(
            self._validate_rating_key_format(
                candidate.rating_key, candidate.insurance_type
            )
        )

        return to_validation_result(violations)

    @beartype
    def _validate_multiplier(self, candidate: RatingFact) -> list[BusinessRuleViolation]:
        s = self._settings
        multiplier = candidate.multiplier

        if multiplier < s.min_multiplier:
            return [
                _error(
                    "MULTIPLIER_MIN",
                    f"Multiplier {multiplier} is below minimum allowed value {s.min_multiplier}",
                    "multiplier",
                )
            ]
        if multiplier > s.max_multiplier:
            return [
                _error(
                    "MULTIPLIER_MAX",
                    f"Multiplier {multiplier} exceeds maximum allowed value {s.max_multiplier}",
                    "multiplier",
                )
            ]
        if multiplier > s.suspicious_multiplier:
            return [
                _warning(
                    "MULTIPLIER_HIGH",
                    f"Multiplier {multiplier} is unusually high (above {s.suspicious_multiplier}), verify before use",
                    "multiplier",
                )
            ]
        return []

    @beartype
    def _validate_validity_window(
        self, candidate: RatingFact
    ) -> list[BusinessRuleViolation]:
        if candidate.valid_to is not None and candidate.valid_from > candidate.valid_to:
            return [
                _error(
                    "VALIDITY_WINDOW_INVERTED",
                    "Valid from date must be before valid to date",
                    "valid_from",
                )
            ]
        return []

    @beartype
    def _validate_overlaps(self, candidate: RatingFact) -> list[BusinessRuleViolation]:
        """Overlaps are surfaced but allowed, e.g. for transitional tables."""
        try:
            overlapping = self._store.facts_overlapping(
                candidate.insurance_type,
                candidate.rating_key,
                candidate.valid_from,
                candidate.valid_to,
            )
        except Exception as e:
            logger.error(
                "Overlap lookup failed for %s: %s", candidate.description, e
            )
            return [
                _error(
                    "RATING_TABLE_UNAVAILABLE",
                    f"{LOOKUP_FAILED_PREFIX} for {candidate.rating_key}: {e}",
                    "rating_key",
                )
            ]

        others = [fact for fact in overlapping if fact.id != candidate.id]
        if others:
            return [
                _warning(
                    "VALIDITY_WINDOW_OVERLAP",
                    f"Rating table has overlapping validity periods with {len(others)} other entries",
                    "valid_from",
                )
            ]
        return []

    @beartype
    def _validate_rating_key_format(
        self, rating_key: str, insurance_type: InsuranceType
    ) -> list[BusinessRuleViolation]:
        # RatingFact rejects blank keys; facts built with model_construct or
        # loaded by another backend skip that check
        if not rating_key or not rating_key.strip():
            return [_error("RATING_KEY_EMPTY", "Rating key cannot be empty", "rating_key")]

        violations = []
        if not rating_key.startswith(RECOGNIZED_KEY_PREFIXES):
            violations.append(
                _warning(
                    "RATING_KEY_NAMING",
                    f"Rating key '{rating_key}' does not follow standard naming conventions",
                    "rating_key",
                )
            )

        foreign_prefixes = tuple(
            prefix
            for other_type, prefix in TYPE_KEY_PREFIXES.items()
            if other_type != insurance_type
        )
        if rating_key.startswith(foreign_prefixes):
            violations.append(
                _warning(
                    "RATING_KEY_TYPE_MISMATCH",
                    f"Rating key '{rating_key}' seems inconsistent with insurance type {insurance_type.value}",
                    "rating_key",
                )
            )

        return violations


@beartype
def _shift_years(on: date, years: int) -> date:
    """Same calendar day ``years`` later (Feb 29 falls back to Feb 28)."""
    try:
        return on.replace(year=on.year + years)
    except ValueError:
        return on.replace(year=on.year + years, day=28)

