from __future__ import annotations

from flask import Flask, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_enum
from ..common.web import (
    current_user_id,
    json_body,
    login_required,
    ok,
    optional_int,
    provider_required,
    require_field,
    require_int,
)
from ..container import Container
from ..core.enums import PayslipStatus, Role


def register(app: Flask, container: Container) -> None:
    service = container.payslip_service

    @app.route("/api/payslips/generate", methods=["POST"], endpoint="api_payslips_generate")
    @provider_required
    def generate():
        data = json_body()
        payslip = service.generate(
            provider_id=current_user_id(),
            worker_id=require_int(data, "support_worker_id"),
            period_start=parse_iso_date(require_field(data, "pay_period_start")),
            period_end=parse_iso_date(require_field(data, "pay_period_end")),
            hourly_rate=require_field(data, "hourly_rate"),
            deductions=data.get("deductions", 0),
            notes=data.get("notes"),
        )
        return ok(payslip.to_dict(), 201)

    @app.route("/api/payslips", methods=["GET"], endpoint="api_payslips_list")
    @login_required
    def list_payslips():
        user_id = current_user_id()
        status_s = request.args.get("status")
        status = require_enum(PayslipStatus, status_s, "status") if status_s else None

        if session.get("role") == Role.SERVICE_PROVIDER.value:
            items = service.list(
                provider_id=user_id,
                worker_id=optional_int(request.args.get("worker_id")),
                status=status,
            )
        else:
            items = service.list(worker_id=user_id, status=status)
        return ok([p.to_dict(with_items=False) for p in items])

    @app.route("/api/payslips/<int:payslip_id>", methods=["GET"], endpoint="api_payslips_get")
    @login_required
    def get_payslip(payslip_id: int):
        detail = service.get_detail(payslip_id=payslip_id, actor_id=current_user_id())
        return ok(detail.to_dict())

    @app.route("/api/payslips/<int:payslip_id>", methods=["PATCH"], endpoint="api_payslips_update")
    @provider_required
    def update_payslip(payslip_id: int):
        data = json_body()
        payslip = service.update(
            payslip_id=payslip_id,
            provider_id=current_user_id(),
            hourly_rate=data.get("hourly_rate"),
            deductions=data.get("deductions"),
            notes=data.get("notes"),
        )
        return ok(payslip.to_dict())

    @app.route("/api/payslips/<int:payslip_id>", methods=["DELETE"], endpoint="api_payslips_delete")
    @provider_required
    def delete_payslip(payslip_id: int):
        service.delete(payslip_id=payslip_id, provider_id=current_user_id())
        return ok({"success": True})

    @app.route("/api/payslips/<int:payslip_id>/issue", methods=["POST"], endpoint="api_payslips_issue")
    @provider_required
    def issue(payslip_id: int):
        payslip = service.issue(payslip_id=payslip_id, provider_id=current_user_id())
        return ok(payslip.to_dict())

    @app.route("/api/payslips/<int:payslip_id>/mark-paid", methods=["POST"], endpoint="api_payslips_mark_paid")
    @provider_required
    def mark_paid(payslip_id: int):
        payslip = service.mark_paid(payslip_id=payslip_id, provider_id=current_user_id())
        return ok(payslip.to_dict())

    @app.route("/api/payslips/summary/<int:worker_id>", methods=["GET"], endpoint="api_payslips_summary")
    @provider_required
    def summary(worker_id: int):
        result = service.summary(worker_id=worker_id, provider_id=current_user_id())
        return ok(result.to_dict())
