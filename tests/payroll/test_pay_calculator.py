from datetime import datetime
from decimal import Decimal

from src.shift_payroll.shift_payroll.payroll.calculator.standard_calculator import StandardPayCalculator
from src.shift_payroll.shift_payroll.timesheets.model import Timesheet


def _ts(ts_id, hours):
    return Timesheet(
        timesheet_id=ts_id,
        shift_id=1,
        support_worker_id=2,
        start_time=datetime(2026, 3, 2, 9),
        total_hours=None if hours is None else Decimal(hours),
    )


def test_total_hours_treats_open_timesheets_as_zero():
    calc = StandardPayCalculator()
    assert calc.total_hours([_ts(1, "7.50"), _ts(2, None), _ts(3, "0.25")]) == Decimal("7.75")


def test_total_hours_of_nothing_is_zero():
    assert StandardPayCalculator().total_hours([]) == Decimal("0.00")


def test_pay_rounds_half_up():
    figures = StandardPayCalculator().pay(Decimal("7.75"), Decimal("33.33"), Decimal("10.00"))
    # 7.75 * 33.33 = 258.3075
    assert figures.gross_pay == Decimal("258.31")
    assert figures.net_pay == Decimal("248.31")


def test_deductions_larger_than_gross_give_negative_net():
    figures = StandardPayCalculator().pay(Decimal("1.00"), Decimal("10.00"), Decimal("15.00"))
    assert figures.net_pay == Decimal("-5.00")
