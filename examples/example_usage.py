"""Example: drive the service layer directly (no Flask).

Controllers are thin; the payroll rules live in the services. Run after
``scripts/init_db.py`` and ``scripts/seed_db.py``.
"""

import importlib
from datetime import date, datetime

from config import get_settings_module

from src.shift_payroll.shift_payroll.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    provider_id, worker_id = 1, 2

    shift = container.shift_service.create(
        provider_id=provider_id,
        worker_id=worker_id,
        title="Morning support",
        start_time=datetime(2026, 3, 2, 9, 0),
        end_time=datetime(2026, 3, 2, 17, 0),
    )
    ts = container.timesheet_service.clock_in(
        shift_id=shift.shift_id, worker_id=worker_id, start_time=datetime(2026, 3, 2, 9, 0)
    )
    ts = container.timesheet_service.clock_out(
        timesheet_id=ts.timesheet_id, worker_id=worker_id, end_time=datetime(2026, 3, 2, 17, 0), break_minutes=30
    )
    container.timesheet_service.submit(timesheet_id=ts.timesheet_id, worker_id=worker_id)
    container.timesheet_service.approve(timesheet_id=ts.timesheet_id, provider_id=provider_id)

    payslip = container.payslip_service.generate(
        provider_id=provider_id,
        worker_id=worker_id,
        period_start=date(2026, 3, 1),
        period_end=date(2026, 3, 31),
        hourly_rate="30.00",
        deductions="20.00",
    )
    print(payslip.to_dict())


if __name__ == "__main__":
    main()
