from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Room


class RoomRepository(Protocol):
    """Room directory.

    The decision engine only ever asks for active rooms; reports also need
    inactive ones to label historic records.
    """

    def get_by_id(self, room_id: str) -> Optional[Room]:
        raise NotImplementedError

    def get_active_room(self, room_id: str) -> Optional[Room]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Room]:
        raise NotImplementedError

    def create_room(self, room: Room) -> Room:
        raise NotImplementedError
