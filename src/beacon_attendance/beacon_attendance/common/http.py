from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role


def json_error(message: str, status: int, **extra):
    body = {"message": message}
    body.update(extra)
    return jsonify(body), status


def current_user_id() -> Optional[int]:
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def current_role() -> Optional[Role]:
    role = session.get("role")
    try:
        return Role(role) if role else None
    except ValueError:
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Login required", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Login required", 401)
            if current_role() != role:
                return json_error(f"{role.value.capitalize()} access required", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


faculty_required = role_required(Role.FACULTY)
student_required = role_required(Role.STUDENT)
