"""Domain models package for the premium rating engine.

This package exports the immutable Pydantic models the engine reads:
insurance types, rating facts and vehicles.
"""

from .base import BaseModelConfig
from .rating import InsuranceType, RatingFact
from .vehicle import Vehicle, whole_years_between

__all__ = [
    # Base models
    "BaseModelConfig",
    # Rating tables
    "InsuranceType",
    "RatingFact",
    # Vehicles
    "Vehicle",
    "whole_years_between",
]
