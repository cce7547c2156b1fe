# models.py
from __future__ import annotations
from dataclasses import dataclass, field
from threading import RLock, Timer
from typing import List, Literal, Optional, Dict, Any, Set, Tuple

SeatRole = Literal["seat1", "seat2"]
RoomStatus = Literal["waiting", "pending_acceptance", "playing", "finished"]

SEAT_ROLES: Tuple[str, str] = ("seat1", "seat2")
MAX_PLAYERS = 2

# Allowed status edges. finished/playing -> waiting and finished -> playing
# are the reset edges, everything else moves forward only.
STATUS_TRANSITIONS: Dict[str, Set[str]] = {
    "waiting": {"playing"},
    "pending_acceptance": {"playing"},
    "playing": {"finished", "waiting"},
    "finished": {"playing", "waiting"},
}


def other_seat(seat: SeatRole) -> SeatRole:
    return "seat2" if seat == "seat1" else "seat1"


@dataclass(frozen=True)
class Cell:
    seat: SeatRole
    answer: str

    def to_dict(self):
        return {"seat": self.seat, "answer": self.answer}


@dataclass(frozen=True)
class Tier:
    name: str
    cost: int
    prize: int


LEAGUES: Dict[str, Tier] = {
    "amateur": Tier("amateur", cost=10, prize=20),
    "pro": Tier("pro", cost=25, prize=50),
    "elite": Tier("elite", cost=50, prize=100),
}


@dataclass
class Seat:
    sid: str
    username: str
    role: SeatRole

    def to_dict(self):
        return {"seat": self.role, "username": self.username}


@dataclass
class SessionRecord:
    sid: str
    username: Optional[str] = None
    room_id: Optional[str] = None


@dataclass
class Categories:
    """Row/column labels of a grid, plus the canonical answers in curated mode."""
    rows: List[str]
    cols: List[str]
    # (row_label, col_label) -> canonical answer; None means free mode
    answers: Optional[Dict[Tuple[str, str], str]] = None

    @property
    def curated(self) -> bool:
        return self.answers is not None

    def fixed_answer(self, row_label: str, col_label: str) -> Optional[str]:
        if not self.answers:
            return None
        # the pairing is unordered
        return self.answers.get((row_label, col_label)) or self.answers.get((col_label, row_label))

    def to_dict(self):
        return {"rows": list(self.rows), "cols": list(self.cols)}


@dataclass
class Room:
    room_id: str
    categories: Categories
    host: Optional[str] = None
    password: Optional[str] = None
    entry_fee: int = 0
    prize: int = 0
    league: Optional[str] = None  # tier name for matchmade rooms
    status: RoomStatus = "waiting"
    board: Any = None
    current_turn: SeatRole = "seat1"
    used_answers: Set[str] = field(default_factory=set)
    players: List[Seat] = field(default_factory=list)
    accepted: Set[str] = field(default_factory=set)
    reset_timer: Optional[Timer] = None
    lock: Any = field(default_factory=RLock, repr=False, compare=False)

    def __post_init__(self):
        if self.board is None:
            from board_logic import Board  # avoid circular import
            self.board = Board()

    def transition(self, new_status: RoomStatus) -> None:
        if new_status not in STATUS_TRANSITIONS.get(self.status, set()):
            raise ValueError(f"Illegal room transition {self.status} -> {new_status}")
        if new_status == "playing" and len(self.players) != MAX_PLAYERS:
            raise ValueError("A room can only play with exactly two participants")
        self.status = new_status

    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    def free_role(self) -> Optional[SeatRole]:
        taken = {p.role for p in self.players}
        return next((r for r in SEAT_ROLES if r not in taken), None)

    def seat_by_sid(self, sid: str) -> Optional[Seat]:
        return next((p for p in self.players if p.sid == sid), None)

    def seat_by_role(self, role: SeatRole) -> Optional[Seat]:
        return next((p for p in self.players if p.role == role), None)

    def seat_by_username(self, username: str) -> Optional[Seat]:
        return next((p for p in self.players if p.username == username), None)

    def cancel_reset(self) -> None:
        if self.reset_timer:
            self.reset_timer.cancel()
            self.reset_timer = None
