from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.classroom_admin.classroom_admin.attendance.model import AttendanceEntry
from src.classroom_admin.classroom_admin.attendance.service import AttendanceService, parse_entries
from src.classroom_admin.classroom_admin.core.enums import AttendanceStatus
from src.classroom_admin.classroom_admin.core.exceptions import (
    AuthorizationError,
    ScopeMismatchError,
    StoreError,
    ValidationError,
)

from tests.fakes import COURSE_A1, COURSE_A2, COURSE_B1

DAY = date(2024, 3, 4)


@pytest.fixture
def service(attendance_ledger, directory, gate):
    return AttendanceService(attendance_ledger, directory, gate, retry_attempts=2)


def _entries(*pairs):
    return [{"student_id": sid, "status": status} for sid, status in pairs]


def test_monitor_records_attendance_for_own_cohort(service, attendance_ledger, monitor):
    written = service.record(
        monitor,
        course_id=COURSE_A1,
        attendance_date=DAY,
        entries=_entries((12, "PRESENT"), (13, "absent"), (14, "Late")),
    )

    assert written == 3
    assert attendance_ledger.rows[(13, COURSE_A1, DAY)].status == AttendanceStatus.ABSENT
    assert attendance_ledger.rows[(14, COURSE_A1, DAY)].status == AttendanceStatus.LATE
    assert all(r.recorded_by == monitor.user_id for r in attendance_ledger.rows.values())


def test_resubmission_overwrites_instead_of_duplicating(service, attendance_ledger, monitor):
    service.record(monitor, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT")))
    service.record(monitor, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "ABSENT")))

    assert len(attendance_ledger.rows) == 1
    assert attendance_ledger.rows[(12, COURSE_A1, DAY)].status == AttendanceStatus.ABSENT


def test_same_day_at_different_times_lands_on_one_key(service, attendance_ledger, monitor):
    service.record(monitor, course_id=COURSE_A1, attendance_date=datetime(2024, 3, 4, 8, 5), entries=_entries((12, "PRESENT")))
    service.record(monitor, course_id=COURSE_A1, attendance_date=datetime(2024, 3, 4, 17, 45), entries=_entries((12, "LATE")))

    assert list(attendance_ledger.rows) == [(12, COURSE_A1, DAY)]
    assert attendance_ledger.rows[(12, COURSE_A1, DAY)].status == AttendanceStatus.LATE


def test_other_courses_and_days_are_untouched(service, attendance_ledger, monitor):
    service.record(monitor, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT")))
    service.record(monitor, course_id=COURSE_A2, attendance_date=DAY, entries=_entries((12, "ABSENT")))
    service.record(monitor, course_id=COURSE_A1, attendance_date=date(2024, 3, 11), entries=_entries((12, "LATE")))

    assert attendance_ledger.rows[(12, COURSE_A1, DAY)].status == AttendanceStatus.PRESENT
    assert len(attendance_ledger.rows) == 3


def test_foreign_student_rejects_the_whole_batch(service, attendance_ledger, monitor):
    with pytest.raises(ScopeMismatchError) as exc:
        service.record(
            monitor,
            course_id=COURSE_A1,
            attendance_date=DAY,
            entries=_entries((12, "PRESENT"), (22, "ABSENT"), (999, "LATE")),
        )

    assert exc.value.ids == (22, 999)
    assert attendance_ledger.rows == {}
    assert attendance_ledger.write_calls == 0


def test_non_monitor_cannot_record(service, attendance_ledger, student):
    with pytest.raises(AuthorizationError):
        service.record(student, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT")))
    assert attendance_ledger.rows == {}


def test_anonymous_and_faculty_cannot_record(service, faculty):
    with pytest.raises(AuthorizationError):
        service.record(None, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT")))
    with pytest.raises(AuthorizationError):
        service.record(faculty, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT")))


def test_monitor_cannot_record_for_a_course_of_another_cohort(service, attendance_ledger, monitor):
    with pytest.raises(AuthorizationError):
        service.record(monitor, course_id=COURSE_B1, attendance_date=DAY, entries=_entries((12, "PRESENT")))
    with pytest.raises(AuthorizationError):
        service.record(monitor, course_id=4242, attendance_date=DAY, entries=_entries((12, "PRESENT")))
    assert attendance_ledger.rows == {}


def test_other_monitor_is_scoped_to_own_cohort(service, attendance_ledger, other_monitor):
    service.record(other_monitor, course_id=COURSE_B1, attendance_date=DAY, entries=_entries((22, "ABSENT")))

    with pytest.raises(ScopeMismatchError):
        service.record(other_monitor, course_id=COURSE_B1, attendance_date=DAY, entries=_entries((12, "ABSENT")))
    assert list(attendance_ledger.rows) == [(22, COURSE_B1, DAY)]


def test_revoked_monitor_is_rejected_on_next_write(service, monitor):
    demoted = replace(monitor, is_monitor=False)
    with pytest.raises(AuthorizationError):
        service.record(demoted, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT")))


@pytest.mark.parametrize(
    "entries",
    [
        [],
        "12:PRESENT",
        None,
        5,
        {"student_id": 12, "status": "PRESENT"},
        [{"student_id": 12, "status": "SICK"}],
        [{"student_id": "abc", "status": "PRESENT"}],
        [{"student_id": 12, "status": "PRESENT"}, {"student_id": 12, "status": "ABSENT"}],
        [42],
    ],
)
def test_malformed_batches_are_rejected(service, attendance_ledger, monitor, entries):
    with pytest.raises(ValidationError):
        service.record(monitor, course_id=COURSE_A1, attendance_date=DAY, entries=entries)
    assert attendance_ledger.rows == {}


def test_invalid_course_id_is_a_validation_error(service, monitor):
    with pytest.raises(ValidationError):
        service.record(monitor, course_id="x", attendance_date=DAY, entries=_entries((12, "PRESENT")))


def test_transient_store_failure_is_retried(service, attendance_ledger, monitor):
    attendance_ledger.fail_next = 1

    written = service.record(monitor, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT")))

    assert written == 1
    assert attendance_ledger.write_calls == 2
    assert (12, COURSE_A1, DAY) in attendance_ledger.rows


def test_persistent_store_failure_surfaces_after_retries(service, attendance_ledger, monitor):
    attendance_ledger.fail_next = 5

    with pytest.raises(StoreError):
        service.record(monitor, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT")))

    assert attendance_ledger.write_calls == 2
    assert attendance_ledger.rows == {}


def test_counts_and_latest_for_courses(service, monitor):
    service.record(monitor, course_id=COURSE_A1, attendance_date=DAY, entries=_entries((12, "PRESENT"), (13, "LATE")))
    service.record(monitor, course_id=COURSE_A1, attendance_date=date(2024, 3, 11), entries=_entries((12, "ABSENT")))

    counts = service.counts_for(12)
    assert (counts.present, counts.absent, counts.late, counts.total) == (1, 1, 0, 2)

    latest = service.latest_for_courses([COURSE_A1, COURSE_A2])
    assert list(latest) == [COURSE_A1]
    assert latest[COURSE_A1].attendance_date == date(2024, 3, 11)
    assert [r.student_id for r in latest[COURSE_A1].records] == [12]


def test_parse_entries_accepts_prebuilt_entries():
    entry = AttendanceEntry(student_id=12, status=AttendanceStatus.LATE)
    assert parse_entries([entry]) == [entry]
