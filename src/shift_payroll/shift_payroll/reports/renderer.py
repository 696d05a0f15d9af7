from __future__ import annotations

from typing import Protocol

from .model import ShiftReportSummary


class ReportRenderer(Protocol):
    """Turns a compiled shift report into a binary document (e.g. PDF).

    Implementations are supplied by the host application.
    """

    mimetype: str

    def render(self, report: ShiftReportSummary) -> bytes:
        raise NotImplementedError
