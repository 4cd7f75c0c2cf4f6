from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceLedger
from .attendance.service import AttendanceService
from .cohorts.mysql_directory_repository import MySQLCohortDirectory
from .cohorts.repository import CohortDirectory
from .core.constants import DEFAULT_DUTY_WEEK_DAYS, DEFAULT_STORE_RETRY_ATTEMPTS
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .duty.mysql_duty_repository import MySQLDutyRepository
from .duty.repository import DutyLedger
from .duty.service import DutyService
from .permissions.gate import PermissionGate
from .prefill.resolver import PrefillResolver
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import CourseScheduleRepository
from .schedules.service import ScheduleService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    cohort_directory: CohortDirectory
    schedules_repo: CourseScheduleRepository
    attendance_repo: AttendanceLedger
    duty_repo: DutyLedger

    auth_service: AuthService
    permission_gate: PermissionGate
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    duty_service: DutyService
    prefill_resolver: PrefillResolver
    dashboard_service: DashboardService


def assemble(
    *,
    users_repo: UserRepository,
    cohort_directory: CohortDirectory,
    schedules_repo: CourseScheduleRepository,
    attendance_repo: AttendanceLedger,
    duty_repo: DutyLedger,
    conn: Optional[DatabaseConnection] = None,
    retry_attempts: int = DEFAULT_STORE_RETRY_ATTEMPTS,
    duty_week_days: int = DEFAULT_DUTY_WEEK_DAYS,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory)."""

    auth_service = AuthService(users_repo)
    permission_gate = PermissionGate(cohort_directory)
    schedule_service = ScheduleService(schedules_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        cohort_directory,
        permission_gate,
        retry_attempts=retry_attempts,
    )
    duty_service = DutyService(
        duty_repo,
        cohort_directory,
        permission_gate,
        week_days=duty_week_days,
        retry_attempts=retry_attempts,
    )
    prefill_resolver = PrefillResolver(attendance_repo, duty_repo, cohort_directory)
    dashboard_service = DashboardService(
        cohort_directory,
        attendance_service,
        duty_service,
        prefill_resolver,
        permission_gate,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        cohort_directory=cohort_directory,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        duty_repo=duty_repo,
        auth_service=auth_service,
        permission_gate=permission_gate,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
        duty_service=duty_service,
        prefill_resolver=prefill_resolver,
        dashboard_service=dashboard_service,
    )


def build_container(
    *,
    db_config: dict,
    retry_attempts: int = DEFAULT_STORE_RETRY_ATTEMPTS,
    duty_week_days: int = DEFAULT_DUTY_WEEK_DAYS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        cohort_directory=MySQLCohortDirectory(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        duty_repo=MySQLDutyRepository(conn),
        retry_attempts=retry_attempts,
        duty_week_days=duty_week_days,
    )
