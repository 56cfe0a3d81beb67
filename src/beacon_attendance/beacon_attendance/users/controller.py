from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.http import current_user_id, json_error, login_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import AuthenticationError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        try:
            s_user = container.auth_service.authenticate(
                str(data.get("username") or ""),
                str(data.get("password") or ""),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except AuthenticationError as e:
            return json_error(str(e), 401)
        except StorageError:
            return json_error("Login is temporarily unavailable", 503)

        session.clear()
        session.permanent = True
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        logger.info("User %s logged in (%s)", s_user.username, s_user.role.value)
        return jsonify({"user": s_user.to_dict()}), 200

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @login_required
    def logout():
        session.clear()
        return jsonify({"message": "Logged out successfully"}), 200

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            user = container.user_service.get_user(current_user_id())
        except StorageError:
            return json_error("Failed to fetch user", 503)
        if not user:
            session.clear()
            return json_error("User not found", 401)
        return jsonify(user.to_public_dict()), 200
