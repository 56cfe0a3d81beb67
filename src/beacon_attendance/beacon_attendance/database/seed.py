from __future__ import annotations

import logging

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..rooms.model import Room
from ..rooms.repository import RoomRepository
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"username": "STU12345", "password": "password123", "full_name": "Jane Doe", "role": Role.STUDENT, "device_id": "ABC-XYZ-123"},
    {"username": "STU12346", "password": "password123", "full_name": "John Smith", "role": Role.STUDENT, "device_id": "DEF-ABC-456"},
    {"username": "FAC001", "password": "faculty123", "full_name": "Dr. Williams", "role": Role.FACULTY, "device_id": None},
]

DEMO_ROOMS = [
    Room(room_id="room-a", name="Computer Science Lab", beacon_id="BEACON-CS-001"),
    Room(room_id="room-b", name="Physics Lab", beacon_id="BEACON-PH-002"),
    Room(room_id="room-c", name="Main Auditorium", beacon_id="BEACON-AU-003"),
]


def seed_demo_data(users: UserRepository, rooms: RoomRepository) -> None:
    """Insert demo accounts and rooms; existing usernames / room ids are left alone."""
    created_users = 0
    for u in DEMO_USERS:
        if users.get_by_username(u["username"]):
            continue
        users.create_user(
            username=u["username"],
            full_name=u["full_name"],
            password_hash=generate_password_hash(u["password"]),
            role=u["role"],
            device_id=u["device_id"],
        )
        created_users += 1

    created_rooms = 0
    for room in DEMO_ROOMS:
        if rooms.get_by_id(room.room_id):
            continue
        rooms.create_room(room)
        created_rooms += 1

    logger.info("Demo seed: %d users, %d rooms created", created_users, created_rooms)
