from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.shift_payroll.shift_payroll.core.enums import PayslipItemType, PayslipStatus, TimesheetStatus
from src.shift_payroll.shift_payroll.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from src.shift_payroll.shift_payroll.timesheets.model import Timesheet

from tests.fakes import ALICE_ID, BOB_ID, OTHER_PROVIDER_ID, PROVIDER_ID, STRANGER_ID


def _march_timesheets(world, worker_id=ALICE_ID):
    world.approved_timesheet(shift_id=1, worker_id=worker_id, start=datetime(2026, 3, 2, 9), hours="8.00")
    world.approved_timesheet(shift_id=2, worker_id=worker_id, start=datetime(2026, 3, 3, 9), hours="8.00")
    world.approved_timesheet(shift_id=3, worker_id=worker_id, start=datetime(2026, 3, 31, 18), hours="4.00")


def _generate(world, worker_id=ALICE_ID, **overrides):
    kwargs = dict(
        provider_id=PROVIDER_ID,
        worker_id=worker_id,
        period_start=date(2026, 3, 1),
        period_end=date(2026, 3, 31),
        hourly_rate="30",
        deductions="20",
    )
    kwargs.update(overrides)
    return world.container.payslip_service.generate(**kwargs)


def test_generate_totals_approved_hours(world):
    _march_timesheets(world)

    payslip = _generate(world)

    assert payslip.total_hours == Decimal("20.00")
    assert payslip.hourly_rate == Decimal("30.00")
    assert payslip.gross_pay == Decimal("600.00")
    assert payslip.deductions == Decimal("20.00")
    assert payslip.net_pay == Decimal("580.00")
    assert payslip.status == PayslipStatus.DRAFT
    assert payslip.pay_period_start == datetime(2026, 3, 1)
    assert payslip.pay_period_end.date() == date(2026, 3, 31)

    items = world.payslips.list_items(payslip_id=payslip.payslip_id)
    assert [i.item_type for i in items] == [PayslipItemType.SHIFT_HOURS, PayslipItemType.DEDUCTION]
    assert items[0].description == "Hours worked (3 shifts)"
    assert items[0].quantity == Decimal("20.00")
    assert items[0].rate == Decimal("30.00")
    assert items[0].amount == Decimal("600.00")
    assert items[1].amount == Decimal("20.00")


def test_generate_without_deductions_has_only_hours_item(world):
    _march_timesheets(world)

    payslip = _generate(world, deductions=None)

    assert payslip.net_pay == payslip.gross_pay == Decimal("600.00")
    items = world.payslips.list_items(payslip_id=payslip.payslip_id)
    assert [i.item_type for i in items] == [PayslipItemType.SHIFT_HOURS]


def test_generate_with_no_timesheets_still_creates_zero_payslip(world):
    payslip = _generate(world)

    assert payslip.total_hours == Decimal("0.00")
    assert payslip.gross_pay == Decimal("0.00")
    assert payslip.net_pay == Decimal("-20.00")
    items = world.payslips.list_items(payslip_id=payslip.payslip_id)
    assert items[0].description == "Hours worked (0 shifts)"


def test_generate_skips_unapproved_and_out_of_period(world):
    _march_timesheets(world)
    world.approved_timesheet(shift_id=4, worker_id=ALICE_ID, start=datetime(2026, 4, 1, 0, 0), hours="5.00")
    world.approved_timesheet(shift_id=5, worker_id=ALICE_ID, start=datetime(2026, 2, 28, 23, 59), hours="5.00")
    world.timesheets.add(
        Timesheet(
            timesheet_id=500,
            shift_id=6,
            support_worker_id=ALICE_ID,
            start_time=datetime(2026, 3, 10, 9),
            total_hours=Decimal("6.00"),
            status=TimesheetStatus.SUBMITTED,
        )
    )
    world.approved_timesheet(shift_id=7, worker_id=BOB_ID, start=datetime(2026, 3, 10, 9), hours="6.00")

    payslip = _generate(world)

    assert payslip.total_hours == Decimal("20.00")


def test_generate_allows_inactive_relationship(world):
    _march_timesheets(world, worker_id=BOB_ID)

    payslip = _generate(world, worker_id=BOB_ID)

    assert payslip.support_worker_id == BOB_ID
    assert payslip.total_hours == Decimal("20.00")


def test_generate_requires_relationship(world):
    with pytest.raises(AuthorizationError):
        _generate(world, worker_id=STRANGER_ID)
    with pytest.raises(AuthorizationError):
        _generate(world, provider_id=OTHER_PROVIDER_ID)


def test_generate_rejects_reversed_period_and_bad_rate(world):
    with pytest.raises(ValidationError):
        _generate(world, period_start=date(2026, 3, 31), period_end=date(2026, 3, 1))
    with pytest.raises(ValidationError):
        _generate(world, hourly_rate="-1")
    with pytest.raises(ValidationError):
        _generate(world, hourly_rate="abc")


def test_rate_is_rounded_before_multiplying(world):
    world.approved_timesheet(shift_id=1, worker_id=ALICE_ID, start=datetime(2026, 3, 2, 9), hours="3.00")

    payslip = _generate(world, hourly_rate="25.555", deductions=0)

    assert payslip.hourly_rate == Decimal("25.56")
    assert payslip.gross_pay == Decimal("76.68")


def test_issue_then_pay(world):
    _march_timesheets(world)
    svc = world.container.payslip_service
    payslip = _generate(world)

    issued = svc.issue(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID, now=datetime(2026, 4, 1, 10))
    assert issued.status == PayslipStatus.ISSUED
    assert issued.issued_date == datetime(2026, 4, 1, 10)

    paid = svc.mark_paid(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID, now=datetime(2026, 4, 3, 10))
    assert paid.status == PayslipStatus.PAID
    assert paid.paid_date == datetime(2026, 4, 3, 10)
    assert paid.net_pay == Decimal("580.00")

    with pytest.raises(StateConflictError):
        svc.mark_paid(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID)
    with pytest.raises(StateConflictError):
        svc.issue(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID)


def test_cannot_pay_a_draft(world):
    payslip = _generate(world)
    with pytest.raises(StateConflictError):
        world.container.payslip_service.mark_paid(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID)


def test_other_provider_cannot_touch_payslip(world):
    payslip = _generate(world)
    with pytest.raises(AuthorizationError):
        world.container.payslip_service.issue(payslip_id=payslip.payslip_id, provider_id=OTHER_PROVIDER_ID)


def test_update_recomputes_figures_and_items(world):
    _march_timesheets(world)
    svc = world.container.payslip_service
    payslip = _generate(world)

    updated = svc.update(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID, hourly_rate="35", deductions="0")

    assert updated.hourly_rate == Decimal("35.00")
    assert updated.gross_pay == Decimal("700.00")
    assert updated.net_pay == Decimal("700.00")
    assert updated.deductions == Decimal("0.00")

    items = world.payslips.list_items(payslip_id=payslip.payslip_id)
    assert len(items) == 1
    assert items[0].item_type == PayslipItemType.SHIFT_HOURS
    assert items[0].description == "Hours worked (3 shifts)"
    assert items[0].amount == Decimal("700.00")
    assert items[0].rate == Decimal("35.00")


def test_update_keeps_unchanged_values(world):
    _march_timesheets(world)
    svc = world.container.payslip_service
    payslip = _generate(world, notes="March")

    updated = svc.update(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID, deductions="50")

    assert updated.hourly_rate == Decimal("30.00")
    assert updated.net_pay == Decimal("550.00")
    assert updated.notes == "March"
    items = world.payslips.list_items(payslip_id=payslip.payslip_id)
    assert [i.amount for i in items] == [Decimal("600.00"), Decimal("50.00")]


def test_update_and_delete_only_drafts(world):
    svc = world.container.payslip_service
    payslip = _generate(world)
    svc.issue(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID)

    with pytest.raises(StateConflictError):
        svc.update(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID, hourly_rate="40")
    with pytest.raises(StateConflictError):
        svc.delete(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID)


def test_delete_removes_payslip_and_items(world):
    _march_timesheets(world)
    svc = world.container.payslip_service
    payslip = _generate(world)

    svc.delete(payslip_id=payslip.payslip_id, provider_id=PROVIDER_ID)

    assert world.payslips.get_by_id(payslip.payslip_id) is None
    assert world.payslips.list_items(payslip_id=payslip.payslip_id) == []
    with pytest.raises(NotFoundError):
        svc.get_detail(payslip_id=payslip.payslip_id, actor_id=PROVIDER_ID)


def test_summary_totals_by_status(world):
    _march_timesheets(world)
    svc = world.container.payslip_service

    paid = _generate(world)
    svc.issue(payslip_id=paid.payslip_id, provider_id=PROVIDER_ID)
    svc.mark_paid(payslip_id=paid.payslip_id, provider_id=PROVIDER_ID)

    issued = _generate(world, deductions="0")
    svc.issue(payslip_id=issued.payslip_id, provider_id=PROVIDER_ID)

    latest = _generate(world, hourly_rate="10")

    summary = svc.summary(worker_id=ALICE_ID, provider_id=PROVIDER_ID)
    assert summary.total_payslips == 3
    assert summary.total_paid == Decimal("580.00")
    assert summary.total_pending == Decimal("600.00")
    assert summary.last_payslip.payslip_id == latest.payslip_id


def test_summary_with_no_payslips(world):
    summary = world.container.payslip_service.summary(worker_id=ALICE_ID, provider_id=PROVIDER_ID)
    assert summary.total_payslips == 0
    assert summary.total_paid == Decimal("0.00")
    assert summary.last_payslip is None


def test_detail_is_visible_to_both_parties_only(world):
    _march_timesheets(world)
    svc = world.container.payslip_service
    payslip = _generate(world)

    detail = svc.get_detail(payslip_id=payslip.payslip_id, actor_id=ALICE_ID)
    assert detail.worker_name == "Alice Nguyen"
    assert len(detail.items) == 2
    assert svc.get_detail(payslip_id=payslip.payslip_id, actor_id=PROVIDER_ID).payslip == payslip

    with pytest.raises(AuthorizationError):
        svc.get_detail(payslip_id=payslip.payslip_id, actor_id=BOB_ID)


def test_list_filters_and_requires_owner(world):
    svc = world.container.payslip_service
    first = _generate(world)
    _generate(world, worker_id=BOB_ID)
    svc.issue(payslip_id=first.payslip_id, provider_id=PROVIDER_ID)

    assert len(svc.list(provider_id=PROVIDER_ID)) == 2
    assert [d.payslip.payslip_id for d in svc.list(worker_id=ALICE_ID)] == [first.payslip_id]
    assert [d.worker_name for d in svc.list(provider_id=PROVIDER_ID, status=PayslipStatus.DRAFT)] == ["Bob Tran"]

    with pytest.raises(ValidationError):
        svc.list()
