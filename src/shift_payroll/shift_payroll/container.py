from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_REPORT_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .payroll.mysql_payslip_repository import MySQLPayslipRepository
from .payroll.repository import PayslipRepository
from .payroll.service import PayslipService
from .relationships.guard import RelationshipGuard
from .relationships.mysql_relationship_repository import MySQLRelationshipRepository
from .relationships.repository import RelationshipRepository
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.renderer import ReportRenderer
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .shifts.hours import ShiftHoursService
from .shifts.mysql_shift_repository import MySQLShiftNotesRepository, MySQLShiftRepository
from .shifts.repository import ShiftNotesRepository, ShiftRepository
from .shifts.service import ShiftService
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository
from .timesheets.service import TimesheetService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    relationships_repo: RelationshipRepository
    shifts_repo: ShiftRepository
    shift_notes_repo: ShiftNotesRepository
    timesheets_repo: TimesheetRepository
    payslips_repo: PayslipRepository
    reports_repo: ReportRepository

    relationship_guard: RelationshipGuard
    shift_service: ShiftService
    shift_hours_service: ShiftHoursService
    timesheet_service: TimesheetService
    payslip_service: PayslipService
    report_service: ReportService

    report_renderer: Optional[ReportRenderer] = None
    conn: Optional[DatabaseConnection] = None


def assemble_container(
    *,
    users_repo: UserRepository,
    relationships_repo: RelationshipRepository,
    shifts_repo: ShiftRepository,
    shift_notes_repo: ShiftNotesRepository,
    timesheets_repo: TimesheetRepository,
    payslips_repo: PayslipRepository,
    reports_repo: ReportRepository,
    report_renderer: Optional[ReportRenderer] = None,
    report_default_days: int = DEFAULT_REPORT_DAYS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""
    guard = RelationshipGuard(relationships_repo)

    return Container(
        users_repo=users_repo,
        relationships_repo=relationships_repo,
        shifts_repo=shifts_repo,
        shift_notes_repo=shift_notes_repo,
        timesheets_repo=timesheets_repo,
        payslips_repo=payslips_repo,
        reports_repo=reports_repo,
        relationship_guard=guard,
        shift_service=ShiftService(shifts_repo, shift_notes_repo, guard),
        shift_hours_service=ShiftHoursService(shifts_repo, shift_notes_repo, users_repo),
        timesheet_service=TimesheetService(timesheets_repo, shifts_repo, guard),
        payslip_service=PayslipService(payslips_repo, users_repo, guard),
        report_service=ReportService(reports_repo, users_repo, default_days=report_default_days),
        report_renderer=report_renderer,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    report_renderer: Optional[ReportRenderer] = None,
    report_default_days: int = DEFAULT_REPORT_DAYS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        relationships_repo=MySQLRelationshipRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        shift_notes_repo=MySQLShiftNotesRepository(conn),
        timesheets_repo=MySQLTimesheetRepository(conn),
        payslips_repo=MySQLPayslipRepository(conn),
        reports_repo=MySQLReportRepository(conn),
        report_renderer=report_renderer,
        report_default_days=report_default_days,
        conn=conn,
    )
