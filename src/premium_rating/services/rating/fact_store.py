# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rating fact store contract and in-memory implementation.

The engine never owns storage. It consumes the ``RatingFactStore`` protocol,
and administration adds ``WritableRatingFactStore``. Any backend (SQL,
document store, service client) that answers these queries can be plugged
in. ``InMemoryRatingFactStore`` keeps facts as a sorted list of validity
windows per (insurance type, rating key).
"""

from collections.abc import Iterator
from datetime import date
from typing import Protocol, runtime_checkable
from uuid import UUID

from beartype import beartype

from ...models.rating import InsuranceType, RatingFact


@runtime_checkable
class RatingFactStore(Protocol):
    """Queries the rating engine runs against persisted rating facts."""

    def facts_for(
        self, insurance_type: InsuranceType, rating_key: str, on: date
    ) -> list[RatingFact]:
        """Facts for the type and key whose window contains ``on``."""
        ...

    def facts_overlapping(
        self,
        insurance_type: InsuranceType,
        rating_key: str,
        valid_from: date,
        valid_to: date | None,
    ) -> list[RatingFact]:
        """Facts for the type and key whose window intersects the given one."""
        ...

    def all_currently_valid(self, insurance_type: InsuranceType) -> list[RatingFact]:
        """Facts of the type valid today."""
        ...

    def all_valid_on_date(
        self, insurance_type: InsuranceType, on: date
    ) -> list[RatingFact]:
        """Facts of the type valid on the given date."""
        ...


@runtime_checkable
class WritableRatingFactStore(RatingFactStore, Protocol):
    """Rating fact store that also accepts administrative changes."""

    def add(self, fact: RatingFact) -> RatingFact:
        """Store a fact, replacing any stored fact with the same id."""
        ...

    def remove(self, fact_id: UUID) -> bool:
        """Remove a fact by id; returns whether anything was removed."""
        ...

    def expired(self) -> list[RatingFact]:
        """Facts whose validity window ended before today."""
        ...

    def future_effective(self) -> list[RatingFact]:
        """Facts that only start applying after today."""
        ...


def window_order(fact: RatingFact) -> tuple[date, date, str]:
    """Sort key placing earlier validity windows first."""
    return (fact.valid_from, fact.valid_to or date.max, str(fact.id))


@beartype
class InMemoryRatingFactStore:
    """Rating fact store backed by per-key ordered validity windows.

    Every query returns facts ordered by ``valid_from`` (ties broken by
    ``valid_to`` then id), so the first match is always deterministic.
    """

    def __init__(self, facts: list[RatingFact] | None = None) -> None:
        """Initialize store, optionally seeded with facts."""
        self._windows: dict[tuple[InsuranceType, str], list[RatingFact]] = {}
        for fact in facts or []:
            self.add(fact)

    def __len__(self) -> int:
        return sum(len(windows) for windows in self._windows.values())

    def __iter__(self) -> Iterator[RatingFact]:
        for key in sorted(self._windows, key=lambda k: (k[0].value, k[1])):
            yield from self._windows[key]

    @beartype
    def add(self, fact: RatingFact) -> RatingFact:
        """Store a fact, replacing any stored fact with the same id."""
        self.remove(fact.id)
        windows = self._windows.setdefault((fact.insurance_type, fact.rating_key), [])
        windows.append(fact)
        windows.sort(key=window_order)
        return fact

    @beartype
    def remove(self, fact_id: UUID) -> bool:
        """Remove a fact by id; returns whether anything was removed."""
        for key, windows in list(self._windows.items()):
            remaining = [fact for fact in windows if fact.id != fact_id]
            if len(remaining) != len(windows):
                if remaining:
                    self._windows[key] = remaining
                else:
                    del self._windows[key]
                return True
        return False

    @beartype
    def facts_for(
        self, insurance_type: InsuranceType, rating_key: str, on: date
    ) -> list[RatingFact]:
        """Facts for the type and key whose window contains ``on``."""
        windows = self._windows.get((insurance_type, rating_key), [])
        return [fact for fact in windows if fact.is_valid_for_date(on)]

    @beartype
    def facts_overlapping(
        self,
        insurance_type: InsuranceType,
        rating_key: str,
        valid_from: date,
        valid_to: date | None,
    ) -> list[RatingFact]:
        """Facts for the type and key whose window intersects the given one."""
        windows = self._windows.get((insurance_type, rating_key), [])
        return [fact for fact in windows if fact.overlaps(valid_from, valid_to)]

    @beartype
    def all_currently_valid(self, insurance_type: InsuranceType) -> list[RatingFact]:
        """Facts of the type valid today."""
        return self.all_valid_on_date(insurance_type, date.today())

    @beartype
    def all_valid_on_date(
        self, insurance_type: InsuranceType, on: date
    ) -> list[RatingFact]:
        """Facts of the type valid on the given date."""
        return [
            fact
            for fact in self
            if fact.applies_to(insurance_type) and fact.is_valid_for_date(on)
        ]

    @beartype
    def expired(self) -> list[RatingFact]:
        """Facts whose validity window ended before today."""
        return [fact for fact in self if fact.is_expired()]

    @beartype
    def future_effective(self) -> list[RatingFact]:
        """Facts that only start applying after today."""
        return [fact for fact in self if fact.is_future_effective()]
