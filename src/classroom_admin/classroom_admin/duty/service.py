from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterable, Optional, Sequence

from ..cohorts.membership import ensure_all_members
from ..cohorts.repository import CohortDirectory
from ..common.datetime_utils import DateLike, canonical_day
from ..common.retry import retry_on_store_error
from ..common.validators import require_ids
from ..core.constants import DEFAULT_DUTY_WEEK_DAYS, DEFAULT_STORE_RETRY_ATTEMPTS
from ..core.exceptions import ValidationError
from ..permissions.gate import PermissionGate
from ..users.service import SessionUser
from .model import DutyRecord
from .repository import DutyLedger

logger = logging.getLogger(__name__)


class DutyService:
    """Use case: the cohort monitor assigns duty; everyone reads it."""

    def __init__(
        self,
        duty: DutyLedger,
        directory: CohortDirectory,
        gate: PermissionGate,
        *,
        week_days: int = DEFAULT_DUTY_WEEK_DAYS,
        retry_attempts: int = DEFAULT_STORE_RETRY_ATTEMPTS,
    ):
        self._duty = duty
        self._directory = directory
        self._gate = gate
        self._week_days = max(1, int(week_days))
        self._retry_attempts = int(retry_attempts)

    def assign(self, actor: Optional[SessionUser], *, duty_date: DateLike, assignee_ids: Iterable[Any]) -> DutyRecord:
        grant = self._gate.require_monitor(actor)
        day = canonical_day(duty_date)

        ids = frozenset(require_ids(assignee_ids, "Assignee"))
        if not ids:
            raise ValidationError("Please choose at least one student on duty")
        ensure_all_members(self._directory, grant.cohort_id, ids)

        retry_on_store_error(
            lambda: self._duty.assign(
                cohort_id=grant.cohort_id,
                duty_date=day,
                assignee_ids=ids,
                assigned_by=grant.monitor_id,
            ),
            attempts=self._retry_attempts,
            what="duty assignment",
        )
        logger.info("Monitor %s assigned duty for cohort %s on %s: %s", grant.monitor_id, grant.cohort_id, day, sorted(ids))
        return DutyRecord(cohort_id=grant.cohort_id, duty_date=day, assignee_ids=ids, assigned_by=grant.monitor_id)

    def for_date(self, cohort_id: int, duty_date: DateLike) -> Optional[DutyRecord]:
        return self._duty.get_for_date(cohort_id=int(cohort_id), duty_date=canonical_day(duty_date))

    def for_range(self, cohort_id: int, start: DateLike, end: DateLike) -> Sequence[DutyRecord]:
        start_d, end_d = canonical_day(start), canonical_day(end)
        if start_d > end_d:
            return []
        return self._duty.get_for_range(cohort_id=int(cohort_id), start=start_d, end=end_d)

    def week_from(self, cohort_id: int, today: date) -> Sequence[DutyRecord]:
        """Duty for ``today`` and the following days (``week_days`` days in total)."""
        return self.for_range(cohort_id, today, today + timedelta(days=self._week_days - 1))

    def for_cohorts_on(self, cohort_ids: Sequence[int], duty_date: DateLike):
        return self._duty.get_for_cohorts_on(cohort_ids=list(cohort_ids), duty_date=canonical_day(duty_date))
