# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rating table management.

Administrative and reporting access to rating facts: listing the tables
that apply on a date and storing new facts only after they pass validation.
"""

from datetime import date

from beartype import beartype

from ...core.config import RatingSettings, get_settings
from ...core.logging_utils import get_logger
from ...core.result_types import Err, Ok, Result
from ...models.rating import InsuranceType, RatingFact
from ...schemas.rating import RatingValidationResult
from .business_rules import RatingValidator
from .calculators import require_arguments
from .fact_store import WritableRatingFactStore

logger = get_logger(__name__)


@beartype
class RatingTableService:
    """Service for listing and storing rating table entries."""

    def __init__(
        self,
        store: WritableRatingFactStore,
        settings: RatingSettings | None = None,
        validator: RatingValidator | None = None,
    ) -> None:
        """Initialize rating table service."""
        self._store = store
        self._validator = validator or RatingValidator(
            store, settings or get_settings()
        )

    @beartype
    def get_rating_tables_for_date(
        self, insurance_type: InsuranceType | None, on: date | None
    ) -> list[RatingFact]:
        """Rating facts of the insurance type valid on the given date.

        Raises:
            InvalidArgumentError: if any argument is None
        """
        require_arguments(insurance_type=insurance_type, date=on)
        return self._store.all_valid_on_date(insurance_type, on)

    @beartype
    def get_current_rating_tables(
        self, insurance_type: InsuranceType | None
    ) -> list[RatingFact]:
        """Rating facts of the insurance type valid today.

        Raises:
            InvalidArgumentError: if the insurance type is None
        """
        require_arguments(insurance_type=insurance_type)
        return self._store.all_currently_valid(insurance_type)

    @beartype
    def get_expired_rating_tables(self) -> list[RatingFact]:
        """Rating facts whose validity ended before today."""
        return self._store.expired()

    @beartype
    def get_future_rating_tables(self) -> list[RatingFact]:
        """Rating facts that only become effective after today."""
        return self._store.future_effective()

    @beartype
    def validate_rating_fact(self, fact: RatingFact | None) -> RatingValidationResult:
        """Validate a rating fact without storing it."""
        return self._validator.validate_rating_table(fact)

    @beartype
    def save_rating_fact(self, fact: RatingFact | None) -> Result[RatingFact, str]:
        """Validate and store a rating fact.

        Warnings are logged and do not prevent storing. Any error rejects
        the fact and nothing is written.
        """
        validation = self._validator.validate_rating_table(fact)

        if not validation.is_valid:
            logger.info(
                "Rejected rating fact %s: %s",
                fact.description,
                "; ".join(validation.errors),
            )
            return Err(
                f"Rating fact {fact.description} rejected: "
                + "; ".join(validation.errors)
            )

        for warning in validation.warnings:
            logger.warning("Rating fact %s: %s", fact.description, warning)

        stored = self._store.add(fact)
        logger.info("Stored rating fact %s", stored.description)
        return Ok(stored)

    @beartype
    def remove_rating_fact(self, fact: RatingFact) -> Result[bool, str]:
        """Remove a stored rating fact."""
        if not self._store.remove(fact.id):
            return Err(f"Rating fact {fact.description} not found")
        logger.info("Removed rating fact %s", fact.description)
        return Ok(True)
