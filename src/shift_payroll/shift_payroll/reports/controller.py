from __future__ import annotations

import csv
import io
import logging

from flask import Flask, jsonify

from ..common.web import current_user_id, ok, optional_date_arg, provider_required
from ..container import Container
from .model import ShiftReportSummary

logger = logging.getLogger(__name__)

_CSV_FIELDS = [
    "worker_name",
    "client_name",
    "shift_date",
    "scheduled_start",
    "scheduled_end",
    "clock_in",
    "clock_out",
    "break_minutes",
    "total_hours",
]


def register(app: Flask, container: Container) -> None:
    def _build() -> ShiftReportSummary:
        return container.report_service.build_report(
            provider_id=current_user_id(),
            start_date=optional_date_arg("start_date"),
            end_date=optional_date_arg("end_date"),
        )

    def _filename(report: ShiftReportSummary, ext: str) -> str:
        return f"shift_report_{report.start_date:%Y%m%d}_{report.end_date:%Y%m%d}.{ext}"

    def _write_report_csv(*, report: ShiftReportSummary, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=_CSV_FIELDS)
        writer.writeheader()
        for row in report.rows:
            writer.writerow(row.to_dict())

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/shifts", methods=["GET"], endpoint="api_reports_shifts")
    @provider_required
    def report_preview():
        return ok(_build().to_dict())

    @app.route("/api/reports/shifts.csv", methods=["GET"], endpoint="api_reports_shifts_csv")
    @provider_required
    def report_csv():
        report = _build()
        return _write_report_csv(report=report, filename=_filename(report, "csv"))

    @app.route("/api/reports/shifts.pdf", methods=["GET"], endpoint="api_reports_shifts_pdf")
    @provider_required
    def report_pdf():
        renderer = container.report_renderer
        if renderer is None:
            return (
                jsonify({"success": False, "error": "not_implemented", "message": "No report renderer is configured"}),
                501,
            )

        report = _build()
        payload = renderer.render(report)
        logger.info("Rendered report (%s bytes, %s shifts)", len(payload), report.total_shifts)
        return app.response_class(
            payload,
            mimetype=getattr(renderer, "mimetype", "application/pdf"),
            headers={"Content-Disposition": f"attachment; filename={_filename(report, 'pdf')}"},
        )
