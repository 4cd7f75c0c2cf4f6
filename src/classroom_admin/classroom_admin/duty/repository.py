from __future__ import annotations

from datetime import date
from typing import AbstractSet, Mapping, Optional, Protocol, Sequence

from .model import DutyRecord


class DutyLedger(Protocol):
    """Idempotent store keyed by (cohort_id, duty_date) -> set of assignees."""

    def assign(self, *, cohort_id: int, duty_date: date, assignee_ids: AbstractSet[int], assigned_by: int) -> None:
        """Replace the full assignee set for the key (not additive)."""

        raise NotImplementedError

    def get_for_date(self, *, cohort_id: int, duty_date: date) -> Optional[DutyRecord]:
        raise NotImplementedError

    def get_for_range(self, *, cohort_id: int, start: date, end: date) -> Sequence[DutyRecord]:
        """Records with start <= duty_date <= end, ascending by date."""

        raise NotImplementedError

    def get_for_cohorts_on(self, *, cohort_ids: Sequence[int], duty_date: date) -> Mapping[int, DutyRecord]:
        raise NotImplementedError
