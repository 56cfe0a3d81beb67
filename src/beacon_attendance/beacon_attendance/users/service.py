from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    full_name: str
    role: Role
    device_id: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "name": self.full_name,
            "role": self.role.value,
            "deviceId": self.device_id,
        }


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser(
            user_id=user.user_id,
            username=user.username,
            full_name=user.full_name,
            role=user.role,
            device_id=user.device_id,
        )


class UserService:
    """Use case: provision accounts and read the student roster."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_account(
        self,
        *,
        username: str,
        full_name: str,
        password: str,
        role: Role,
        device_id: Optional[str] = None,
    ) -> int:
        username = require_non_empty(username, "Username")
        full_name = require_non_empty(full_name, "Full name")
        require_min_length(password, "Password", 6)

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        return self._users.create_user(
            username=username,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=role,
            device_id=(device_id or "").strip() or None,
        )

    def get_user(self, user_id: int):
        return self._users.get_by_id(int(user_id))

    def list_students(self):
        return self._users.list_by_role(Role.STUDENT)
