from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_day
from ..common.http import faculty_required, json_error
from ..container import Container
from ..core.constants import DEFAULT_TOTAL_ENROLLED
from ..core.exceptions import StorageError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/analytics/stats/<room_id>", methods=["GET"], endpoint="analytics_stats")
    @faculty_required
    def analytics_stats(room_id: str):
        try:
            date_s = request.args.get("date")
            day = parse_day(date_s) if date_s else container.clock.now().date()
            total_s = request.args.get("total")
            total = int(total_s) if total_s else int(app.config.get("DEFAULT_TOTAL_ENROLLED", DEFAULT_TOTAL_ENROLLED))
        except ValueError:
            return json_error("Invalid date or total", 400)
        if total < 0:
            return json_error("total must be >= 0", 400)

        try:
            if not container.rooms_repo.get_by_id(room_id):
                return json_error("Room not found", 404)
            stats = container.analytics_service.compute_stats(room_id, day, total)
        except StorageError:
            return json_error("Failed to fetch analytics", 503)

        body = stats.to_dict()
        body["roomId"] = room_id
        body["date"] = day.strftime("%Y-%m-%d")
        return jsonify(body), 200
