from __future__ import annotations

import logging
from typing import Iterable

from ..core.exceptions import ScopeMismatchError
from .model import CohortMember
from .repository import CohortDirectory

logger = logging.getLogger(__name__)


def members_by_id(directory: CohortDirectory, cohort_id: int) -> dict[int, CohortMember]:
    return {m.student_id: m for m in directory.list_members(cohort_id)}


def ensure_all_members(directory: CohortDirectory, cohort_id: int, student_ids: Iterable[int]) -> dict[int, CohortMember]:
    """Validate a whole batch against cohort membership before anything is written.

    A single foreign id rejects the batch; nothing is skipped.
    """
    members = members_by_id(directory, cohort_id)
    foreign = sorted({int(sid) for sid in student_ids if int(sid) not in members})
    if foreign:
        logger.warning("Batch for cohort %s rejected, foreign student ids: %s", cohort_id, foreign)
        raise ScopeMismatchError(
            "Please only choose students of your own cohort (not in cohort: "
            + ", ".join(str(sid) for sid in foreign)
            + ")",
            ids=foreign,
        )
    return members
