from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Room:
    """Domain entity: a classroom with its beacon."""

    room_id: str
    name: str
    beacon_id: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.room_id,
            "name": self.name,
            "beaconId": self.beacon_id,
            "isActive": self.is_active,
        }
