"""
Room and session stores owned by the server instance.
"""

import logging
import random
import string
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from .engine import create_room
from .errors import ROOM_NOT_FOUND, raise_error
from .models import RoomState
from .rules import RuleConfig, default_rules

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


class RoomRegistry:
    """Room code to RoomState. Rooms are created on demand and dropped when empty."""

    def __init__(self, rules: RuleConfig = default_rules, rng: Optional[random.Random] = None):
        self.rules = rules
        self._rng = rng or random.Random()
        self._rooms: Dict[str, RoomState] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return code in self._rooms

    def __iter__(self) -> Iterator[RoomState]:
        return iter(list(self._rooms.values()))

    def generate_code(self) -> str:
        while True:
            code = ''.join(
                self._rng.choice(CODE_ALPHABET) for _ in range(self.rules.room_code_length)
            )
            if code not in self._rooms:
                return code

    def create(self, password: Optional[str] = None) -> RoomState:
        room = create_room(self.generate_code(), password)
        self._rooms[room.code] = room
        logger.info(f"Room {room.code} created")
        return room

    def get(self, code: Optional[str]) -> RoomState:
        """Look up a room, raising ROOM_NOT_FOUND for unknown codes."""
        room = self._rooms.get((code or '').strip().upper())
        if room is None:
            raise_error(ROOM_NOT_FOUND, "Room not found")
        return room

    def is_live(self, room: RoomState) -> bool:
        return self._rooms.get(room.code) is room

    def discard_if_empty(self, code: str) -> bool:
        room = self._rooms.get(code)
        if room is not None and not room.players:
            del self._rooms[code]
            logger.info(f"Room {code} deleted")
            return True
        return False


@dataclass
class Session:
    connection_id: str
    room_code: str


class SessionRegistry:
    """Connection id to the room it has joined."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def bind(self, connection_id: str, room_code: str) -> Session:
        session = Session(connection_id=connection_id, room_code=room_code)
        self._sessions[connection_id] = session
        return session

    def get(self, connection_id: str) -> Optional[Session]:
        return self._sessions.get(connection_id)

    def unbind(self, connection_id: str) -> Optional[Session]:
        return self._sessions.pop(connection_id, None)

    def connections_in(self, room_code: str) -> list:
        return [s.connection_id for s in self._sessions.values() if s.room_code == room_code]
