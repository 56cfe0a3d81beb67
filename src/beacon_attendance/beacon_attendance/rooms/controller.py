from __future__ import annotations

import io
import json

import qrcode
from flask import Flask, jsonify, send_file

from ..common.http import faculty_required, json_error, login_required
from ..container import Container
from ..core.exceptions import StorageError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/rooms", methods=["GET"], endpoint="rooms_list")
    @login_required
    def rooms_list():
        try:
            rooms = container.rooms_repo.list_active()
        except StorageError:
            return json_error("Failed to fetch rooms", 503)
        return jsonify([r.to_dict() for r in rooms]), 200

    @app.route("/api/rooms/<room_id>", methods=["GET"], endpoint="room_detail")
    @login_required
    def room_detail(room_id: str):
        try:
            room = container.rooms_repo.get_by_id(room_id)
        except StorageError:
            return json_error("Failed to fetch room", 503)
        if not room:
            return json_error("Room not found", 404)
        return jsonify(room.to_dict()), 200

    @app.route("/api/rooms/<room_id>/qr", methods=["GET"], endpoint="room_qr_image")
    @faculty_required
    def room_qr_image(room_id: str):
        """QR poster for a room; scanning it submits a mark with method=QR."""
        try:
            room = container.rooms_repo.get_active_room(room_id)
        except StorageError:
            return json_error("Failed to fetch room", 503)
        if not room:
            return json_error("Room not found", 404)

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(json.dumps({"roomId": room.room_id, "beaconId": room.beacon_id}))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)

        return send_file(buf, mimetype="image/png")
