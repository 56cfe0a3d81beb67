from __future__ import annotations

import threading
from typing import Iterable, Optional, Sequence

from ..core.exceptions import DuplicateRecordError
from .model import Room
from .repository import RoomRepository


class InMemoryRoomRepository(RoomRepository):
    def __init__(self, rooms: Iterable[Room] = ()):
        self._lock = threading.Lock()
        self._rooms: dict[str, Room] = {r.room_id: r for r in rooms}

    def get_by_id(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def get_active_room(self, room_id: str) -> Optional[Room]:
        room = self._rooms.get(room_id)
        return room if room and room.is_active else None

    def list_active(self) -> Sequence[Room]:
        with self._lock:
            rooms = [r for r in self._rooms.values() if r.is_active]
        return sorted(rooms, key=lambda r: r.room_id)

    def create_room(self, room: Room) -> Room:
        with self._lock:
            if room.room_id in self._rooms:
                raise DuplicateRecordError(f"Room {room.room_id} already exists")
            self._rooms[room.room_id] = room
        return room
