from __future__ import annotations

import pytest

from src.classroom_admin.classroom_admin.container import assemble
from src.classroom_admin.classroom_admin.permissions.gate import PermissionGate

from tests.fakes import (
    INSTRUCTOR,
    SCHEDULES,
    USERS,
    InMemoryAttendanceLedger,
    InMemoryDirectory,
    InMemoryDutyLedger,
    InMemorySchedules,
    InMemoryUsers,
    session_user,
)


@pytest.fixture
def directory():
    return InMemoryDirectory()


@pytest.fixture
def attendance_ledger():
    return InMemoryAttendanceLedger()


@pytest.fixture
def duty_ledger():
    return InMemoryDutyLedger()


@pytest.fixture
def gate(directory):
    return PermissionGate(directory)


@pytest.fixture
def monitor():
    return session_user(11)


@pytest.fixture
def student():
    return session_user(12)


@pytest.fixture
def other_monitor():
    return session_user(21)


@pytest.fixture
def faculty():
    return session_user(INSTRUCTOR)


@pytest.fixture
def container(directory, attendance_ledger, duty_ledger):
    return assemble(
        users_repo=InMemoryUsers(USERS),
        cohort_directory=directory,
        schedules_repo=InMemorySchedules(SCHEDULES),
        attendance_repo=attendance_ledger,
        duty_repo=duty_ledger,
        retry_attempts=2,
    )


@pytest.fixture
def app(container):
    from src.classroom_admin.classroom_admin.main import create_app

    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    def _login(user_id: int):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
        return client

    return _login
