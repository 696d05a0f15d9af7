from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.shift_payroll.shift_payroll.container import Container, assemble_container
from src.shift_payroll.shift_payroll.core.enums import RelationshipStatus, Role, TimesheetStatus
from src.shift_payroll.shift_payroll.timesheets.model import Timesheet
from src.shift_payroll.shift_payroll.users.model import User

from tests.fakes import (
    ALICE_ID,
    BOB_ID,
    OTHER_PROVIDER_ID,
    PROVIDER_ID,
    STRANGER_ID,
    InMemoryPayslips,
    InMemoryRelationships,
    InMemoryReports,
    InMemoryShiftNotes,
    InMemoryShifts,
    InMemoryTimesheets,
    InMemoryUsers,
)


@dataclass
class World:
    users: InMemoryUsers
    relationships: InMemoryRelationships
    shifts: InMemoryShifts
    notes: InMemoryShiftNotes
    timesheets: InMemoryTimesheets
    payslips: InMemoryPayslips
    reports: InMemoryReports
    container: Container

    def approved_timesheet(self, *, shift_id: int, worker_id: int, start: datetime, hours: str) -> Timesheet:
        ts_id = len(self.timesheets.rows) + 100
        return self.timesheets.add(
            Timesheet(
                timesheet_id=ts_id,
                shift_id=shift_id,
                support_worker_id=worker_id,
                start_time=start,
                end_time=start,
                total_hours=Decimal(hours),
                status=TimesheetStatus.APPROVED,
            )
        )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def fixed_today() -> date:
    return date(2026, 3, 31)


@pytest.fixture
def world() -> World:
    users = InMemoryUsers(
        [
            User(PROVIDER_ID, "Sunrise Care", "admin@sunrisecare.example", Role.SERVICE_PROVIDER, "Sunrise Care Pty Ltd"),
            User(ALICE_ID, "Alice Nguyen", "alice@example.com", Role.SUPPORT_WORKER),
            User(BOB_ID, "Bob Tran", "bob@example.com", Role.SUPPORT_WORKER),
            User(OTHER_PROVIDER_ID, "Other Co", None, Role.SERVICE_PROVIDER),
            User(STRANGER_ID, "Sam Stranger", None, Role.SUPPORT_WORKER),
        ]
    )
    relationships = InMemoryRelationships()
    relationships.upsert(provider_id=PROVIDER_ID, worker_id=ALICE_ID, status=RelationshipStatus.ACTIVE)
    relationships.upsert(provider_id=PROVIDER_ID, worker_id=BOB_ID, status=RelationshipStatus.INACTIVE)

    notes = InMemoryShiftNotes()
    shifts = InMemoryShifts(notes)
    timesheets = InMemoryTimesheets()
    payslips = InMemoryPayslips(timesheets)
    reports = InMemoryReports(users, shifts, timesheets, notes)

    container = assemble_container(
        users_repo=users,
        relationships_repo=relationships,
        shifts_repo=shifts,
        shift_notes_repo=notes,
        timesheets_repo=timesheets,
        payslips_repo=payslips,
        reports_repo=reports,
    )
    return World(
        users=users,
        relationships=relationships,
        shifts=shifts,
        notes=notes,
        timesheets=timesheets,
        payslips=payslips,
        reports=reports,
        container=container,
    )
