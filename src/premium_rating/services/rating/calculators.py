# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Premium calculation from time-bounded rating tables.

Premium = base premium(insurance type) x product of the multiplier resolved
for each rating key on the policy date, rounded half-up to the cent once at
the very end.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from beartype import beartype

from ...core.config import RatingSettings, get_settings
from ...core.exceptions import InvalidArgumentError, PremiumCalculationError
from ...core.logging_utils import get_logger
from ...models.rating import InsuranceType, RatingFact
from ...models.vehicle import Vehicle
from ...schemas.rating import CENTS, PremiumBreakdown
from .fact_store import RatingFactStore, window_order
from .rating_keys import RatingKeyDeriver

NEUTRAL_MULTIPLIER = Decimal("1")

logger = get_logger(__name__)


@beartype
def require_arguments(**arguments: object) -> None:
    """Raise InvalidArgumentError for the first argument that is None."""
    for name, value in arguments.items():
        if value is None:
            raise InvalidArgumentError(name)


@beartype
class PremiumCalculator:
    """Multiplicative premium calculator over a rating fact store."""

    def __init__(
        self,
        store: RatingFactStore,
        settings: RatingSettings | None = None,
        key_deriver: RatingKeyDeriver | None = None,
    ) -> None:
        """Initialize calculator.

        Args:
            store: Source of rating facts
            settings: Base premiums and band configuration
            key_deriver: Rating key derivation, built from settings when omitted
        """
        self._store = store
        self._settings = settings or get_settings()
        self._key_deriver = key_deriver or RatingKeyDeriver(self._settings)

    @beartype
    def calculate_premium(
        self,
        insurance_type: InsuranceType | None,
        vehicle: Vehicle | None,
        policy_date: date | None,
    ) -> Decimal:
        """Calculate the final premium rounded to the cent.

        Raises:
            InvalidArgumentError: if any argument is None
            PremiumCalculationError: if the rating fact store fails or holds
                a non-positive multiplier for a rating key
        """
        return self.calculate_premium_breakdown(
            insurance_type, vehicle, policy_date
        ).final_premium

    @beartype
    def calculate_premium_breakdown(
        self,
        insurance_type: InsuranceType | None,
        vehicle: Vehicle | None,
        policy_date: date | None,
        discount_surcharge: Decimal | None = None,
    ) -> PremiumBreakdown:
        """Calculate the premium together with the factors that produced it.

        Args:
            insurance_type: Insurance type being rated
            vehicle: Vehicle being insured
            policy_date: Policy effective date used for rating table lookups
            discount_surcharge: Optional manual adjustment carried alongside
                the rated premium (negative for a discount)

        Returns:
            Breakdown with base premium, per-category multipliers in rating
            order and the rounded final premium

        Raises:
            InvalidArgumentError: if a required argument is None
            PremiumCalculationError: if the rating fact store fails or holds
                a non-positive multiplier for a rating key
        """
        require_arguments(
            insurance_type=insurance_type, vehicle=vehicle, policy_date=policy_date
        )

        base_premium = self.get_base_premium(insurance_type)
        rating_keys = self._key_deriver.derive(insurance_type, vehicle, policy_date)

        try:
            rating_factors = {
                category: self._resolve_multiplier(insurance_type, key, policy_date)
                for category, key in rating_keys.items()
            }
        except PremiumCalculationError:
            raise
        except Exception as e:
            logger.error(
                "Rating fact lookup failed for %s on %s: %s",
                insurance_type.value,
                policy_date,
                e,
            )
            raise PremiumCalculationError(
                f"Failed to calculate premium for {insurance_type.value} insurance",
                insurance_type,
                e,
            ) from e

        final_premium = self.apply_rating_factors(base_premium, rating_factors)

        return PremiumBreakdown(
            insurance_type=insurance_type,
            policy_date=policy_date,
            base_premium=base_premium,
            rating_factors=rating_factors,
            rating_keys=rating_keys,
            final_premium=final_premium,
            discount_surcharge=(
                discount_surcharge if discount_surcharge is not None else Decimal("0.00")
            ),
        )

    @beartype
    def get_base_premium(self, insurance_type: InsuranceType) -> Decimal:
        """Base premium configured for the insurance type."""
        return self._settings.base_premium_for(insurance_type.value)

    @staticmethod
    @beartype
    def apply_rating_factors(
        base_premium: Decimal, rating_factors: dict[str, Decimal]
    ) -> Decimal:
        """Multiply the base premium by every factor and round half-up to cents."""
        premium = base_premium
        for multiplier in rating_factors.values():
            premium *= multiplier
        return premium.quantize(CENTS, rounding=ROUND_HALF_UP)

    @beartype
    def _resolve_multiplier(
        self, insurance_type: InsuranceType, rating_key: str, policy_date: date
    ) -> Decimal:
        """Multiplier for one rating key, neutral when no fact covers the date."""
        facts = self._store.facts_for(insurance_type, rating_key, policy_date)

        if not facts:
            logger.debug(
                "No rating fact for %s %s on %s, using neutral multiplier",
                insurance_type.value,
                rating_key,
                policy_date,
            )
            return NEUTRAL_MULTIPLIER

        if len(facts) > 1:
            logger.warning(
                "%d rating facts for %s %s cover %s, using the one valid from %s",
                len(facts),
                insurance_type.value,
                rating_key,
                policy_date,
                _earliest(facts).valid_from,
            )

        multiplier = _earliest(facts).multiplier
        if multiplier <= 0:
            logger.error(
                "Rating fact for %s %s on %s has non-positive multiplier %s",
                insurance_type.value,
                rating_key,
                policy_date,
                multiplier,
            )
            raise PremiumCalculationError(
                f"Rating factor {rating_key} for {insurance_type.value} insurance "
                f"has non-positive multiplier {multiplier}",
                insurance_type,
            )

        return multiplier


def _earliest(facts: list[RatingFact]) -> RatingFact:
    return min(facts, key=window_order)
