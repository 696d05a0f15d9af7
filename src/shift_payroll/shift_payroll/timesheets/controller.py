from __future__ import annotations

from flask import Flask, request, session

from ..common.datetime_utils import now_local
from ..common.validators import require_enum
from ..common.web import (
    current_user_id,
    json_body,
    login_required,
    ok,
    optional_datetime,
    optional_int,
    provider_required,
    require_int,
    worker_required,
)
from ..container import Container
from ..core.enums import Role, TimesheetStatus


def register(app: Flask, container: Container) -> None:
    service = container.timesheet_service

    @app.route("/api/timesheets/clock-in", methods=["POST"], endpoint="api_timesheets_clock_in")
    @worker_required
    def clock_in():
        data = json_body()
        ts = service.clock_in(
            shift_id=require_int(data, "shift_id"),
            worker_id=current_user_id(),
            start_time=optional_datetime(data.get("start_time")) or now_local(),
            break_minutes=data.get("break_minutes", 0),
            notes=data.get("notes"),
        )
        return ok(ts.to_dict(), 201)

    @app.route("/api/timesheets/<int:timesheet_id>/clock-out", methods=["POST"], endpoint="api_timesheets_clock_out")
    @worker_required
    def clock_out(timesheet_id: int):
        data = json_body()
        ts = service.clock_out(
            timesheet_id=timesheet_id,
            worker_id=current_user_id(),
            end_time=optional_datetime(data.get("end_time")) or now_local(),
            break_minutes=data.get("break_minutes"),
        )
        return ok(ts.to_dict())

    @app.route("/api/timesheets/<int:timesheet_id>/submit", methods=["POST"], endpoint="api_timesheets_submit")
    @worker_required
    def submit(timesheet_id: int):
        ts = service.submit(timesheet_id=timesheet_id, worker_id=current_user_id())
        return ok(ts.to_dict())

    @app.route("/api/timesheets/<int:timesheet_id>/approve", methods=["POST"], endpoint="api_timesheets_approve")
    @provider_required
    def approve(timesheet_id: int):
        ts = service.approve(timesheet_id=timesheet_id, provider_id=current_user_id())
        return ok(ts.to_dict())

    @app.route("/api/timesheets/<int:timesheet_id>/reject", methods=["POST"], endpoint="api_timesheets_reject")
    @provider_required
    def reject(timesheet_id: int):
        data = json_body()
        ts = service.reject(timesheet_id=timesheet_id, provider_id=current_user_id(), reason=data.get("reason"))
        return ok(ts.to_dict())

    @app.route("/api/timesheets", methods=["GET"], endpoint="api_timesheets_list")
    @login_required
    def list_timesheets():
        user_id = current_user_id()
        status_s = request.args.get("status")
        status = require_enum(TimesheetStatus, status_s, "status") if status_s else None

        if session.get("role") == Role.SERVICE_PROVIDER.value:
            worker_id = optional_int(request.args.get("worker_id"))
            if worker_id is None:
                items = [
                    ts
                    for rel in container.relationship_guard.list_for_provider(user_id)
                    for ts in service.list_for_worker(provider_id=user_id, worker_id=rel.support_worker_id)
                ]
            else:
                items = service.list_for_worker(provider_id=user_id, worker_id=worker_id)
            shift_id = optional_int(request.args.get("shift_id"))
            items = [
                ts
                for ts in items
                if (status is None or ts.status == status) and (shift_id is None or ts.shift_id == shift_id)
            ]
        else:
            items = service.list(
                status=status,
                worker_id=user_id,
                shift_id=optional_int(request.args.get("shift_id")),
            )
        return ok([ts.to_dict() for ts in items])

    @app.route("/api/timesheets/<int:timesheet_id>", methods=["GET"], endpoint="api_timesheets_get")
    @login_required
    def get_timesheet(timesheet_id: int):
        ts = service.get(timesheet_id)
        user_id = current_user_id()
        if user_id != ts.support_worker_id:
            shift = container.shift_service.get(ts.shift_id)
            container.relationship_guard.ensure_owner(user_id, shift.service_provider_id, "timesheet")
        return ok(ts.to_dict())

    @app.route("/api/timesheets/<int:timesheet_id>", methods=["DELETE"], endpoint="api_timesheets_delete")
    @worker_required
    def delete_timesheet(timesheet_id: int):
        service.delete(timesheet_id=timesheet_id, worker_id=current_user_id())
        return ok({"success": True})

    @app.route("/api/timesheets/summary/<int:worker_id>", methods=["GET"], endpoint="api_timesheets_summary")
    @login_required
    def summary(worker_id: int):
        result = service.summary(worker_id, actor_id=current_user_id())
        return ok(result.to_dict())
