from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import DuplicateRecordError
from .model import User
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[int, User] = {}
        self._next_id = 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        for user in list(self._by_id.values()):
            if user.username == username:
                return user
        return None

    def create_user(
        self,
        *,
        username: str,
        full_name: str,
        password_hash: str,
        role: Role,
        device_id: Optional[str] = None,
    ) -> int:
        with self._lock:
            if any(u.username == username for u in self._by_id.values()):
                raise DuplicateRecordError(f"Username {username} already exists")
            user_id = self._next_id
            self._next_id += 1
            self._by_id[user_id] = User(
                user_id=user_id,
                username=username,
                full_name=full_name,
                password_hash=password_hash,
                role=role,
                device_id=device_id,
            )
            return user_id

    def list_by_role(self, role: Role) -> Sequence[User]:
        users = [u for u in list(self._by_id.values()) if u.role == role and u.is_active]
        return sorted(users, key=lambda u: u.user_id)
