from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional

from .models import GameConfig
from .room import Room

LOGGER = logging.getLogger("gang_engine")


class RoomRegistry:
    """Process-wide table of live rooms keyed by name.

    Rooms are created on the first join to an unseen name and dropped as soon
    as their last player leaves. Nothing survives a restart.
    """

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        self._rooms: Dict[str, Room] = {}

    def get(self, name: str) -> Optional[Room]:
        return self._rooms.get(name)

    def get_or_create(self, name: str) -> Room:
        room = self._rooms.get(name)
        if room is None:
            room = Room(name, self.config)
            self._rooms[name] = room
            LOGGER.info("Room %s created", name)
        return room

    def discard_if_empty(self, room: Room) -> bool:
        if not room.is_empty():
            return False
        if self._rooms.get(room.name) is room:
            del self._rooms[room.name]
            LOGGER.info("Room %s removed", room.name)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._rooms

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def __len__(self) -> int:
        return len(self._rooms)
