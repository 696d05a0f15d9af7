from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.shift_payroll.shift_payroll.core.exceptions import AuthorizationError, NotFoundError
from src.shift_payroll.shift_payroll.shifts.model import ShiftNotes

from tests.fakes import ALICE_ID, BOB_ID, PROVIDER_ID

WEEK = date(2026, 3, 2)


def _shift(world, start, hours, client_id=None, worker_id=ALICE_ID):
    end = start.replace(hour=start.hour + hours)
    shift_id = world.shifts.create(
        provider_id=PROVIDER_ID, worker_id=worker_id, title="Support", start_time=start, end_time=end
    )
    if client_id:
        world.notes.upsert(ShiftNotes(shift_id=shift_id, client_id=client_id, client_name=f"Client {client_id}"))
    return shift_id


def test_sums_scheduled_hours_for_same_client_in_week(world):
    hours = world.container.shift_hours_service
    first = _shift(world, datetime(2026, 3, 2, 9), 8, "C-1")
    _shift(world, datetime(2026, 3, 8, 10), 4, "C-1")
    _shift(world, datetime(2026, 3, 4, 9), 3, "C-2")
    _shift(world, datetime(2026, 3, 9, 0), 5, "C-1")
    _shift(world, datetime(2026, 3, 3, 9), 6, "C-1", worker_id=BOB_ID)

    result = hours.weekly_client_hours(first, WEEK)

    assert result.shift_hours == Decimal("8.00")
    assert result.weekly_client_hours == Decimal("12.00")


def test_shift_without_notes_counts_zero(world):
    shift_id = _shift(world, datetime(2026, 3, 2, 9), 8)

    result = world.container.shift_hours_service.weekly_client_hours(shift_id, WEEK)

    assert result.weekly_client_hours == Decimal("0.00")


def test_shift_outside_week_reports_zero_for_that_week(world):
    shift_id = _shift(world, datetime(2026, 3, 10, 9), 8, "C-1")

    result = world.container.shift_hours_service.weekly_client_hours(shift_id, WEEK)

    assert result.weekly_client_hours == Decimal("0.00")


def test_no_week_means_no_weekly_figure(world):
    shift_id = _shift(world, datetime(2026, 3, 2, 9), 8, "C-1")

    result = world.container.shift_hours_service.weekly_client_hours(shift_id)

    assert result.weekly_client_hours is None
    assert result.to_dict()["shift_hours"] == "8.00"


def test_weekly_hours_access(world):
    hours = world.container.shift_hours_service
    shift_id = _shift(world, datetime(2026, 3, 2, 9), 8, "C-1")

    with pytest.raises(NotFoundError):
        hours.weekly_client_hours(999, WEEK)
    with pytest.raises(AuthorizationError):
        hours.weekly_client_hours(shift_id, WEEK, actor_id=BOB_ID)


def test_listing_enriches_each_shift(world):
    _shift(world, datetime(2026, 3, 2, 9), 8, "C-1")
    _shift(world, datetime(2026, 3, 3, 9), 2, "C-1")
    _shift(world, datetime(2026, 3, 4, 9), 1)
    _shift(world, datetime(2026, 3, 5, 9), 1, worker_id=77)

    listings = world.container.shift_hours_service.list_with_client_hours(provider_id=PROVIDER_ID, week_start=WEEK)

    assert [l.weekly_client_hours for l in listings] == [
        Decimal("10.00"),
        Decimal("10.00"),
        Decimal("0.00"),
        Decimal("0.00"),
    ]
    assert listings[0].client_name == "Client C-1"
    assert listings[2].client_id is None
    assert listings[3].worker_name == "Unknown"

    data = listings[0].to_dict()
    assert data["worker_name"] == "Alice Nguyen"
    assert data["title"] == "Support"
    assert "shift" not in data


def test_listing_without_week(world):
    _shift(world, datetime(2026, 3, 2, 9), 8, "C-1")

    listings = world.container.shift_hours_service.list_with_client_hours(provider_id=PROVIDER_ID)

    assert listings[0].weekly_client_hours is None
    assert listings[0].shift_hours == Decimal("8.00")
