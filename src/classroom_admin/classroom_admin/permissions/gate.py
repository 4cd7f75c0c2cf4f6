"""Authorization for ledger writes.

A write request moves through::

    UNAUTHENTICATED -> AUTHENTICATED(student) -> AUTHORIZED_MONITOR(cohort) | REJECTED

Only a student flagged as monitor with an assigned cohort is promoted. Every
write is then scoped to that cohort and to courses of that cohort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..cohorts.model import CourseRef
from ..cohorts.repository import CohortDirectory
from ..core.enums import GateState, Role
from ..core.exceptions import AuthorizationError
from ..users.service import SessionUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateDecision:
    state: GateState
    user_id: Optional[int] = None
    cohort_id: Optional[int] = None
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.state == GateState.AUTHORIZED_MONITOR


@dataclass(frozen=True)
class MonitorGrant:
    """Proof that the caller is the monitor of ``cohort_id``."""

    monitor_id: int
    cohort_id: int


class PermissionGate:
    def __init__(self, directory: CohortDirectory):
        self._directory = directory

    def evaluate(self, actor: Optional[SessionUser]) -> GateDecision:
        if actor is None:
            return GateDecision(GateState.UNAUTHENTICATED, reason="Please log in first")

        authenticated = GateDecision(GateState.AUTHENTICATED, user_id=actor.user_id)
        if actor.role != Role.STUDENT:
            return self._reject(authenticated, "Only students can do this")
        if not actor.is_monitor:
            return self._reject(authenticated, "Only the class monitor can record attendance and duty")
        if actor.cohort_id is None:
            return self._reject(authenticated, "You have not been assigned to a cohort")

        return GateDecision(GateState.AUTHORIZED_MONITOR, user_id=actor.user_id, cohort_id=actor.cohort_id)

    def require_monitor(self, actor: Optional[SessionUser]) -> MonitorGrant:
        decision = self.evaluate(actor)
        if not decision.allowed:
            raise AuthorizationError(decision.reason)
        return MonitorGrant(monitor_id=int(decision.user_id), cohort_id=int(decision.cohort_id))

    def require_course(self, grant: MonitorGrant, course_id: int) -> CourseRef:
        course = self._directory.get_course(int(course_id))
        if course is None or course.cohort_id != grant.cohort_id:
            logger.warning(
                "Monitor %s (cohort %s) rejected for course %s",
                grant.monitor_id,
                grant.cohort_id,
                course_id,
            )
            raise AuthorizationError("Please choose a course of your own cohort")
        return course

    @staticmethod
    def _reject(previous: GateDecision, reason: str) -> GateDecision:
        logger.info("Ledger write rejected for user %s: %s", previous.user_id, reason)
        return GateDecision(GateState.REJECTED, user_id=previous.user_id, reason=reason)
