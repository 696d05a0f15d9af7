from __future__ import annotations

from flask import Flask, request, session

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import require_enum
from ..common.web import (
    current_user_id,
    json_body,
    login_required,
    ok,
    optional_date_arg,
    optional_int,
    provider_required,
    require_field,
    require_int,
)
from ..container import Container
from ..core.enums import AssignmentStatus, Role, ShiftStatus

_UPDATABLE = ("title", "description", "start_time", "end_time", "location", "status", "hourly_rate")
_NOTE_FIELDS = ("client_id", "client_name", "task_description", "notes", "special_requirements")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shifts", methods=["POST"], endpoint="api_shifts_create")
    @provider_required
    def create_shift():
        data = json_body()
        shift = container.shift_service.create(
            provider_id=current_user_id(),
            worker_id=require_int(data, "support_worker_id"),
            title=require_field(data, "title"),
            start_time=parse_iso_datetime(require_field(data, "start_time")),
            end_time=parse_iso_datetime(require_field(data, "end_time")),
            location=data.get("location"),
            hourly_rate=data.get("hourly_rate"),
            description=data.get("description"),
        )
        return ok(shift.to_dict(), 201)

    @app.route("/api/shifts", methods=["GET"], endpoint="api_shifts_list")
    @login_required
    def list_shifts():
        user_id = current_user_id()
        status_s = request.args.get("status")
        status = require_enum(ShiftStatus, status_s, "status") if status_s else None

        if session.get("role") == Role.SERVICE_PROVIDER.value:
            listings = container.shift_hours_service.list_with_client_hours(
                provider_id=user_id,
                week_start=optional_date_arg("week_start"),
                worker_id=optional_int(request.args.get("worker_id")),
            )
            rows = [l.to_dict() for l in listings if status is None or l.shift.status == status]
            return ok(rows)

        shifts = container.shift_service.list(worker_id=user_id, status=status)
        return ok([s.to_dict() for s in shifts])

    @app.route("/api/shifts/<int:shift_id>", methods=["GET"], endpoint="api_shifts_get")
    @login_required
    def get_shift(shift_id: int):
        shift = container.shift_service.get(shift_id)
        container.relationship_guard.ensure_party(
            current_user_id(),
            provider_id=shift.service_provider_id,
            worker_id=shift.support_worker_id,
            what="shift",
        )
        return ok(shift.to_dict())

    @app.route("/api/shifts/<int:shift_id>", methods=["PATCH"], endpoint="api_shifts_update")
    @provider_required
    def update_shift(shift_id: int):
        data = json_body()
        fields = {k: data[k] for k in _UPDATABLE if k in data}
        for key in ("start_time", "end_time"):
            if key in fields:
                fields[key] = parse_iso_datetime(fields[key])
        shift = container.shift_service.update(shift_id=shift_id, provider_id=current_user_id(), **fields)
        return ok(shift.to_dict())

    @app.route("/api/shifts/<int:shift_id>", methods=["DELETE"], endpoint="api_shifts_delete")
    @provider_required
    def delete_shift(shift_id: int):
        container.shift_service.delete(shift_id=shift_id, provider_id=current_user_id())
        return ok({"success": True})

    @app.route("/api/shifts/<int:shift_id>/assignments", methods=["GET"], endpoint="api_shift_assignments_list")
    @login_required
    def list_assignments(shift_id: int):
        items = container.shift_service.list_assignments(shift_id=shift_id, actor_id=current_user_id())
        return ok([a.to_dict() for a in items])

    @app.route("/api/shifts/<int:shift_id>/assignments", methods=["POST"], endpoint="api_shift_assignments_create")
    @provider_required
    def assign_worker(shift_id: int):
        data = json_body()
        assignment = container.shift_service.assign(
            shift_id=shift_id,
            provider_id=current_user_id(),
            worker_id=require_int(data, "support_worker_id"),
            status=data.get("status") or AssignmentStatus.ASSIGNED.value,
        )
        return ok(assignment.to_dict(), 201)

    @app.route(
        "/api/shifts/<int:shift_id>/assignments/<int:assignment_id>",
        methods=["PATCH"],
        endpoint="api_shift_assignments_update",
    )
    @login_required
    def update_assignment(shift_id: int, assignment_id: int):
        data = json_body()
        assignment = container.shift_service.update_assignment_status(
            assignment_id=assignment_id,
            shift_id=shift_id,
            actor_id=current_user_id(),
            status=require_field(data, "status"),
        )
        return ok(assignment.to_dict())

    @app.route("/api/shifts/<int:shift_id>/notes", methods=["GET"], endpoint="api_shift_notes_get")
    @login_required
    def get_notes(shift_id: int):
        notes = container.shift_service.get_notes(shift_id=shift_id, actor_id=current_user_id())
        return ok(notes.to_dict())

    @app.route("/api/shifts/<int:shift_id>/notes", methods=["POST"], endpoint="api_shift_notes_save")
    @login_required
    def save_notes(shift_id: int):
        data = json_body()
        values = {k: data.get(k) for k in _NOTE_FIELDS}
        notes = container.shift_service.save_notes(shift_id=shift_id, actor_id=current_user_id(), **values)
        return ok(notes.to_dict())

    @app.route("/api/shifts/<int:shift_id>/notes", methods=["DELETE"], endpoint="api_shift_notes_delete")
    @login_required
    def delete_notes(shift_id: int):
        container.shift_service.delete_notes(shift_id=shift_id, actor_id=current_user_id())
        return ok({"success": True})

    @app.route("/api/shifts/<int:shift_id>/hours", methods=["GET"], endpoint="api_shift_hours")
    @login_required
    def shift_hours(shift_id: int):
        hours = container.shift_hours_service.weekly_client_hours(
            shift_id,
            optional_date_arg("week_start"),
            actor_id=current_user_id(),
        )
        return ok(hours.to_dict())
