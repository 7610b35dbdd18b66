"""
Analytics export sinks.

A sink receives an already computed and masked report and renders it into
an HTTP response. Sinks are registered per format in the
ANALYTICS_EXPORT_SINKS setting (format -> dotted class path).

Author: DSP Development Team
Version: 1.0.0
"""

import csv
import io
import logging
from typing import Any, Dict, Iterator

from django.conf import settings
from django.http import HttpResponse, JsonResponse, StreamingHttpResponse
from django.utils.module_loading import import_string
from openpyxl import Workbook

from ..participation.exceptions import QuizEngineError, ValidationError

logger = logging.getLogger(__name__)

KNOWN_FORMATS = ("json", "csv", "excel")


class ExportFormatUnavailable(QuizEngineError):
    """The format is known but no sink is configured for it."""

    default_message = "This export format is not available."
    default_error_code = "EXPORT_FORMAT_UNAVAILABLE"
    default_status_code = 501


class ExportSink:
    content_type = "application/octet-stream"
    extension = "bin"

    def filename(self, quiz) -> str:
        return f"quiz_{quiz.id}_analytics.{self.extension}"

    def render(self, quiz, report: Dict[str, Any]) -> HttpResponse:
        raise NotImplementedError


class JsonExportSink(ExportSink):
    content_type = "application/json"
    extension = "json"

    def render(self, quiz, report: Dict[str, Any]) -> HttpResponse:
        response = JsonResponse(report)
        response["Content-Disposition"] = f'attachment; filename="{self.filename(quiz)}"'
        return response


class _Echo:
    """File-like object whose write() returns the value instead of storing it."""

    def write(self, value):
        return value


class CsvExportSink(ExportSink):
    """Streams the user performance matrix, one row per participation."""

    content_type = "text/csv"
    extension = "csv"

    def rows(self, report: Dict[str, Any]) -> Iterator[list]:
        matrix = report.get("user_performance_matrix") or {}
        questions = matrix.get("questions") or []
        yield [
            "User ID",
            "User Name",
            "Total Score",
            "Percentage",
            "Time Taken",
            "Completed At",
        ] + [f"Q{q['id']}: {q['question']}" for q in questions]

        for row in matrix.get("matrix") or []:
            cells = []
            for cell in row.get("questions") or []:
                if cell is None:
                    cells.append("not answered")
                else:
                    cells.append("correct" if cell["is_correct"] else "incorrect")
            yield [
                row["user_id"],
                row["user_name"],
                row["total_score"],
                row["percentage"],
                "" if row["time_taken"] is None else row["time_taken"],
                row["completed_at"] or "",
            ] + cells

    def render(self, quiz, report: Dict[str, Any]) -> HttpResponse:
        writer = csv.writer(_Echo())
        response = StreamingHttpResponse(
            (writer.writerow(row) for row in self.rows(report)),
            content_type=self.content_type,
        )
        response["Content-Disposition"] = f'attachment; filename="{self.filename(quiz)}"'
        return response


class ExcelExportSink(CsvExportSink):
    """The CSV rows written to a single worksheet."""

    content_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    extension = "xlsx"

    def render(self, quiz, report: Dict[str, Any]) -> HttpResponse:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Analytics"
        for row in self.rows(report):
            sheet.append(row)
        buffer = io.BytesIO()
        workbook.save(buffer)
        response = HttpResponse(buffer.getvalue(), content_type=self.content_type)
        response["Content-Disposition"] = f'attachment; filename="{self.filename(quiz)}"'
        return response


def get_export_sink(export_format: str) -> ExportSink:
    """
    Resolve the sink for a format.

    Raises:
        ValidationError: unknown format
        ExportFormatUnavailable: known format without a configured sink
    """
    sinks = getattr(settings, "ANALYTICS_EXPORT_SINKS", {})
    path = sinks.get(export_format)
    if path is None:
        if export_format in KNOWN_FORMATS:
            raise ExportFormatUnavailable(details={"format": export_format})
        raise ValidationError(
            f"Unsupported export format '{export_format}'.",
            details={"format": export_format, "supported": list(KNOWN_FORMATS)},
        )
    return import_string(path)()
