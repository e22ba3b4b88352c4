# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Failure types raised by the rating engine.

Validation findings are never raised; they are returned as data. Only
programming errors in the caller and store failures during calculation
surface as exceptions.
"""

from typing import Any

from beartype import beartype


class RatingError(Exception):
    """Base class for rating engine failures."""


class InvalidArgumentError(RatingError, ValueError):
    """A required argument to a rating entry point was missing."""

    def __init__(self, argument: str) -> None:
        """Initialize with the name of the missing argument."""
        self.argument = argument
        super().__init__(f"{argument} cannot be None")


class PremiumCalculationError(RatingError):
    """Premium calculation failed because the rating fact store did."""

    def __init__(
        self,
        message: str,
        insurance_type: Any,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize calculation error.

        Args:
            message: Human-readable description
            insurance_type: Insurance type being rated when the failure happened
            cause: Original exception raised by the store
        """
        self.insurance_type = insurance_type
        self.cause = cause
        super().__init__(message)

    @beartype
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error": "premium_calculation_failed",
            "message": str(self),
            "insurance_type": str(getattr(self.insurance_type, "value", self.insurance_type)),
            "cause": repr(self.cause) if self.cause is not None else None,
        }
