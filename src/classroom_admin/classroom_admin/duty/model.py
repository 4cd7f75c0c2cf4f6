from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class DutyRecord:
    """Domain entity: who is on duty for a cohort on one day.

    Natural key: (cohort_id, duty_date). Re-assignment replaces the whole set.
    """

    cohort_id: int
    duty_date: date
    assignee_ids: FrozenSet[int]
    assigned_by: Optional[int] = None
