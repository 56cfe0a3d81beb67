from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_day
from ..common.http import faculty_required, json_error
from ..container import Container
from ..core.exceptions import StorageError, ValidationError
from .csv_export import report_filename, write_report_csv
from .model import ReportOptions

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _parse_options(data: dict) -> ReportOptions:
        total = data.get("totalEnrolled")
        if total is not None and (isinstance(total, bool) or not isinstance(total, int) or total < 0):
            raise ValidationError("totalEnrolled must be a non-negative integer")
        return ReportOptions(
            include_absent=bool(data.get("includeAbsent", True)),
            include_stats=bool(data.get("includeStats", True)),
            total_enrolled=total,
        )

    @app.route("/api/reports/generate", methods=["POST"], endpoint="reports_generate")
    @faculty_required
    def reports_generate():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return json_error("Invalid report request", 400)

        room_ids = data.get("roomIds") or []
        fmt = (data.get("format") or "csv").lower()
        if not isinstance(room_ids, list) or not all(isinstance(r, str) for r in room_ids):
            return json_error("roomIds must be a list of room ids", 400)
        if fmt not in {"csv", "json"}:
            return json_error(f"Unsupported report format: {fmt}", 400)

        try:
            start = parse_day(str(data.get("startDate") or ""))
            end = parse_day(str(data.get("endDate") or ""))
        except ValueError:
            return json_error("Invalid startDate / endDate", 400)

        try:
            report = container.report_service.build_report(room_ids, start, end, _parse_options(data))
        except ValidationError as e:
            return json_error(str(e), 400)
        except StorageError:
            logger.exception("Report generation failed")
            return json_error("Failed to generate the attendance report", 503)

        if fmt == "json":
            return jsonify({"rows": report.rows, "summary": report.summary}), 200

        return app.response_class(
            write_report_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={report_filename(start, end)}"},
        )
