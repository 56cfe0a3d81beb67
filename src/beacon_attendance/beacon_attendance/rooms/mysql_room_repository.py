from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Room
from .repository import RoomRepository


def _to_room(r: dict) -> Room:
    return Room(
        room_id=str(r["room_id"]),
        name=r["name"],
        beacon_id=r["beacon_id"],
        is_active=bool(r.get("is_active", True)),
    )


class MySQLRoomRepository(RoomRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, room_id: str) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT room_id, name, beacon_id, is_active FROM rooms WHERE room_id=%s",
                (room_id,),
            )
            r = fetchone(cur)
            return _to_room(r) if r else None

    def get_active_room(self, room_id: str) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT room_id, name, beacon_id, is_active FROM rooms WHERE room_id=%s AND is_active=1",
                (room_id,),
            )
            r = fetchone(cur)
            return _to_room(r) if r else None

    def list_active(self) -> Sequence[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT room_id, name, beacon_id, is_active FROM rooms WHERE is_active=1 ORDER BY room_id")
            return [_to_room(r) for r in fetchall(cur)]

    def create_room(self, room: Room) -> Room:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO rooms(room_id, name, beacon_id, is_active)
                VALUES(%s,%s,%s,%s)
                """,
                (room.room_id, room.name, room.beacon_id, 1 if room.is_active else 0),
            )
        return room
