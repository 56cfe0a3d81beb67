from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object (no DB access code).
    """

    user_id: int
    username: str
    full_name: str
    password_hash: str
    role: Role
    device_id: Optional[str] = None
    is_active: bool = True

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "name": self.full_name,
            "role": self.role.value,
            "deviceId": self.device_id,
        }
