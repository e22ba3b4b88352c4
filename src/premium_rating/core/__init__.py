"""Cross-cutting infrastructure: settings, logging, failures and result types."""

from .config import RatingSettings, clear_settings_cache, get_settings
from .exceptions import InvalidArgumentError, PremiumCalculationError, RatingError
from .logging_utils import configure_logging, get_logger
from .result_types import Err, Ok, Result

__all__ = [
    "RatingSettings",
    "get_settings",
    "clear_settings_cache",
    "RatingError",
    "InvalidArgumentError",
    "PremiumCalculationError",
    "configure_logging",
    "get_logger",
    "Ok",
    "Err",
    "Result",
]
