from __future__ import annotations

import logging
from datetime import datetime

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_day
from ..common.http import (
    current_role,
    current_user_id,
    faculty_required,
    json_error,
    login_required,
    student_required,
)
from ..container import Container
from ..core.exceptions import AuthorizationError, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _parse_observed_at(value):
        if not value:
            return None
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            # Informational only; a bad value does not block the mark.
            return None

    def _requested_day():
        date_s = request.args.get("date")
        return parse_day(date_s) if date_s else container.clock.now().date()

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @student_required
    def attendance_mark():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return json_error("Invalid attendance data", 400, error="InvalidInput")

        result = container.attendance_service.mark_attendance(
            current_user_id(),
            data.get("roomId"),
            data.get("proximity"),
            data.get("method") or "BLE",
            _parse_observed_at(data.get("observedAt")),
        )
        if result.ok:
            return jsonify(result.record.to_dict()), 201
        return json_error(result.message, result.error.http_status, error=result.error.value)

    @app.route("/api/attendance/my", methods=["GET"], endpoint="attendance_my")
    @login_required
    def attendance_my():
        user_id = current_user_id()
        try:
            records = container.attendance_service.history_for(
                acting_user_id=user_id, acting_role=current_role(), student_id=user_id
            )
        except StorageError:
            return json_error("Failed to fetch your attendance records", 503)
        return jsonify([r.to_dict() for r in records]), 200

    @app.route("/api/attendance/student/<int:student_id>", methods=["GET"], endpoint="attendance_student")
    @login_required
    def attendance_student(student_id: int):
        try:
            records = container.attendance_service.history_for(
                acting_user_id=current_user_id(), acting_role=current_role(), student_id=student_id
            )
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except StorageError:
            return json_error("Failed to fetch attendance records", 503)
        return jsonify([r.to_dict() for r in records]), 200

    @app.route("/api/attendance/room/<room_id>", methods=["GET"], endpoint="attendance_room")
    @faculty_required
    def attendance_room(room_id: str):
        try:
            day = _requested_day()
        except ValueError:
            return json_error("Invalid date (YYYY-MM-DD)", 400)

        try:
            rows = container.attendance_service.room_day_view(room_id, day)
        except StorageError:
            return json_error("Failed to fetch room attendance", 503)
        return jsonify(rows), 200

    @app.route("/api/attendance/<int:attendance_id>/invalidate", methods=["POST"], endpoint="attendance_invalidate")
    @faculty_required
    def attendance_invalidate(attendance_id: int):
        try:
            record = container.attendance_service.invalidate_record(
                acting_role=current_role(), attendance_id=attendance_id
            )
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except ValidationError as e:
            return json_error(str(e), 409)
        except StorageError:
            return json_error("Failed to invalidate attendance record", 503)
        return jsonify(record.to_dict()), 200
