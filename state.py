# state.py
from threading import RLock
from typing import Dict, List, Optional

from models import Room, SessionRecord, LEAGUES
from matchmaking import MatchmakingQueue


class SessionDirectory:
    """connection -> (identity, room id) and room id -> Room."""

    def __init__(self):
        self._lock = RLock()
        self.sessions: Dict[str, SessionRecord] = {}
        self.rooms: Dict[str, Room] = {}

    # --- sessions ---

    def bind(self, sid: str, username: str) -> SessionRecord:
        with self._lock:
            record = self.sessions.get(sid)
            if record is None:
                record = SessionRecord(sid=sid)
                self.sessions[sid] = record
            if username:
                record.username = username
            return record

    def get(self, sid: str) -> Optional[SessionRecord]:
        return self.sessions.get(sid)

    def set_room(self, sid: str, room_id: Optional[str]):
        with self._lock:
            record = self.sessions.get(sid)
            if record:
                record.room_id = room_id

    def claim_room(self, sid: str, username: str, room_id: str) -> bool:
        """Bind `sid` and seat it in `room_id` unless it already sits in a room."""
        with self._lock:
            record = self.bind(sid, username)
            if record.room_id is not None:
                return False
            record.room_id = room_id
            return True

    def clear_room(self, sid: str, room_id: str = None):
        """Detach `sid` from its room (only from `room_id` when given)."""
        with self._lock:
            record = self.sessions.get(sid)
            if record and (room_id is None or record.room_id == room_id):
                record.room_id = None

    def drop(self, sid: str) -> Optional[SessionRecord]:
        with self._lock:
            return self.sessions.pop(sid, None)

    def room_for(self, sid: str) -> Optional[Room]:
        record = self.sessions.get(sid)
        if not record or not record.room_id:
            return None
        return self.rooms.get(record.room_id)

    # --- rooms ---

    def add_room(self, room: Room) -> bool:
        with self._lock:
            if room.room_id in self.rooms:
                return False
            self.rooms[room.room_id] = room
            return True

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def remove_room(self, room: Room):
        with self._lock:
            if self.rooms.get(room.room_id) is room:
                del self.rooms[room.room_id]
        room.cancel_reset()

    def list_rooms(self) -> List[Room]:
        with self._lock:
            return list(self.rooms.values())

    def clear(self):
        with self._lock:
            for room in self.rooms.values():
                room.cancel_reset()
            self.rooms.clear()
            self.sessions.clear()


# Single in-memory authority for every room, session and queue
directory = SessionDirectory()
matchmaking = MatchmakingQueue(LEAGUES)
