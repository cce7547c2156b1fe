# lobby_events.py
import uuid

from flask import request
from flask_socketio import emit, join_room, leave_room

from economy import charge_league_entry, check_creation_fee, collect_entry_fees, refund_league_entry
from errors import NotAuthorized, NotFound, RejectedInput, ResourceConflict
from extensions import socketio
from handlers.grid_handler import grid_handler as handler
from matchmaking import QueueEntry
from models import LEAGUES, Room, Seat
from state import directory, matchmaking
from trivia import get_oracle
from utils import (
    broadcast_online_counts, broadcast_to_room, emit_balances, game_event,
    require_room, require_seat, send_init,
)


def _username(data) -> str:
    username = data.get("username")
    if not isinstance(username, str) or not username.strip():
        raise RejectedInput("Username is required")
    return username.strip()


def _entry_fee(raw) -> int:
    if raw in (None, ""):
        return 0
    try:
        fee = int(raw)
    except (TypeError, ValueError):
        raise RejectedInput("Invalid entry fee")
    if fee < 0:
        raise RejectedInput("Invalid entry fee")
    return fee


def _ensure_idle(sid: str, username: str = None):
    """A connection sits in at most one room or one queue."""
    if directory.room_for(sid):
        raise ResourceConflict("Leave your current room first")
    if matchmaking.find(sid=sid) or (username and matchmaking.find(username=username)):
        raise ResourceConflict("Already searching for a match")


def _announce_seat(room: Room, seat: Seat):
    emit("roomJoined", {
        "roomId": room.room_id,
        "seat": seat.role,
        "isHost": seat.username == room.host,
    }, to=seat.sid)
    send_init(room, seat)


@socketio.on("createRoom")
@game_event()
def on_create_room(data):
    sid = request.sid
    data = data or {}
    username = _username(data)
    room_id = str(data.get("name") or "").strip()
    if not room_id:
        raise RejectedInput("Room name is required")
    entry_fee = _entry_fee(data.get("entryFee"))
    password = data.get("password") or None

    _ensure_idle(sid, username)
    check_creation_fee(username, entry_fee)

    room = Room(
        room_id=room_id,
        categories=get_oracle().random_categories(),
        host=username,
        password=password,
        entry_fee=entry_fee,
    )
    seat = Seat(sid=sid, username=username, role="seat1")
    room.players.append(seat)
    if not directory.claim_room(sid, username, room_id):
        raise ResourceConflict("Leave your current room first")
    if not directory.add_room(room):
        directory.clear_room(sid, room_id)
        raise ResourceConflict("Room already exists")

    join_room(room_id)
    print(f"[{room_id}] 🏠 Room created by {username} (fee: {entry_fee}, locked: {bool(password)})")
    _announce_seat(room, seat)


@socketio.on("joinRoom")
@game_event()
def on_join_room(data):
    sid = request.sid
    data = data or {}
    username = _username(data)
    room_id = str(data.get("roomId") or "").strip()

    _ensure_idle(sid, username)
    room = directory.get_room(room_id)
    if not room or room.league:
        raise ResourceConflict("Room not found")

    with room.lock:
        if directory.get_room(room_id) is not room:
            raise ResourceConflict("Room not found")
        if room.password and room.password != data.get("password"):
            raise ResourceConflict("Incorrect room password")
        if room.is_full():
            raise ResourceConflict("Room is full")
        if room.status != "waiting":
            raise ResourceConflict("Game already started")
        if room.seat_by_username(username):
            raise ResourceConflict("Already in this room")

        if not directory.claim_room(sid, username, room_id):
            raise ResourceConflict("Leave your current room first")
        # Both balances are checked before either is debited
        try:
            balances = collect_entry_fees(room, username)
        except Exception:
            directory.clear_room(sid, room_id)
            raise

        seat = Seat(sid=sid, username=username, role=room.free_role())
        room.players.append(seat)
        join_room(room_id)
        print(f"[{room_id}] ➕ {username} joined as {seat.role}")

        emit_balances(room, balances)
        _announce_seat(room, seat)
        broadcast_to_room(room, "playerJoined", {"seat": seat.role, "username": username})


@socketio.on("startGame")
@game_event()
def on_start_game(data=None):
    sid = request.sid
    room = require_room(sid)
    with room.lock:
        seat = require_seat(room, sid)
        if seat.username != room.host:
            raise NotAuthorized(f"{seat.username} is not the host of {room.room_id}")
        if room.status != "waiting":
            raise ResourceConflict("Game already started")
        if not room.is_full():
            raise ResourceConflict("Need 2 players to start")
        handler.start_game(room)


# --- leagues ---

def _match_id() -> str:
    return f"Match-{uuid.uuid4().hex[:8]}"


def _open_league_room(tier, waiting: QueueEntry, sid: str, username: str) -> Room:
    """Seat the oldest waiter as host and the newcomer as seat2. Caller holds the queue lock."""
    room = Room(
        room_id=_match_id(),
        categories=get_oracle().random_scenario(),
        host=waiting.username,
        league=tier.name,
        prize=tier.prize,
        status="pending_acceptance",
    )
    host_seat = Seat(sid=waiting.sid, username=waiting.username, role="seat1")
    guest_seat = Seat(sid=sid, username=username, role="seat2")
    room.players.extend([host_seat, guest_seat])
    while not directory.add_room(room):
        room.room_id = _match_id()

    with room.lock:
        for seat in room.players:
            directory.set_room(seat.sid, room.room_id)
            join_room(room.room_id, sid=seat.sid)
        print(f"[{room.room_id}] ⚔️ {tier.name} match: {host_seat.username} vs {guest_seat.username}")

        _announce_seat(room, host_seat)
        emit("playerJoined", {"seat": guest_seat.role, "username": guest_seat.username}, to=host_seat.sid)
        _announce_seat(room, guest_seat)
    return room


@socketio.on("joinLeague")
@game_event()
def on_join_league(data):
    sid = request.sid
    data = data or {}
    tier_name = str(data.get("tier") or "").lower()
    tier = LEAGUES.get(tier_name)
    if not tier:
        raise NotFound(f"Unknown league '{tier_name}'")
    username = _username(data)

    # Balance check, debit and pairing happen as one step per tier
    with matchmaking.lock:
        _ensure_idle(sid, username)
        coins = charge_league_entry(username, tier)
        directory.bind(sid, username)
        emit("balanceUpdate", {"coins": coins}, to=sid)

        waiting = matchmaking.pair_or_enqueue(QueueEntry(sid=sid, username=username, tier=tier.name))
        if waiting:
            _open_league_room(tier, waiting, sid, username)
        else:
            print(f"-> {tier.name} queue: {username} ({sid})")

    broadcast_online_counts()
    if not waiting:
        emit("waitingForMatch", {"tier": tier.name}, to=sid)


@socketio.on("acceptMatch")
@game_event()
def on_accept_match(data=None):
    sid = request.sid
    room = require_room(sid)
    with room.lock:
        seat = require_seat(room, sid)
        if room.status != "pending_acceptance":
            raise NotFound(f"{room.room_id} is not awaiting acceptance")
        room.accepted.add(seat.username)
        print(f"[{room.room_id}] ✅ {seat.username} accepted ({len(room.accepted)}/{len(room.players)})")
        broadcast_to_room(room, "playerAccepted", {"username": seat.username})

        if room.is_full() and all(p.username in room.accepted for p in room.players):
            handler.start_game(room)


@socketio.on("leaveQueue")
@game_event()
def on_leave_queue(data=None):
    sid = request.sid
    with matchmaking.lock:
        removed = matchmaking.remove(sid)
    if not removed:
        return

    for entry in removed:
        print(f"<- {entry.tier} queue: {entry.username} ({sid})")
        coins = refund_league_entry(entry.username, LEAGUES[entry.tier])
        if coins is not None:
            emit("balanceUpdate", {"coins": coins}, to=sid)
    broadcast_online_counts()


# --- leaving ---

def remove_participant(room: Room, sid: str, disconnected: bool = False):
    """Shared leave path for explicit leaves and dropped connections."""
    with room.lock:
        directory.clear_room(sid, room.room_id)
        seat = room.seat_by_sid(sid)
        if not seat:
            return

        if room.status == "pending_acceptance":
            room.players.remove(seat)
            if not disconnected:
                leave_room(room.room_id, sid=sid)
            print(f"[{room.room_id}] 🚪 {seat.username} left before accepting. Match cancelled.")
            broadcast_to_room(room, "matchCancelled", {"roomId": room.room_id})
            for other in room.players:
                directory.clear_room(other.sid, room.room_id)
                leave_room(room.room_id, sid=other.sid)
            room.players.clear()
            directory.remove_room(room)
            return

        handler.on_leave(room, seat)
        room.players.remove(seat)
        room.accepted.discard(seat.username)
        if not disconnected:
            leave_room(room.room_id, sid=sid)

        if not room.players:
            directory.remove_room(room)
            print(f"[{room.room_id}] 🗑️ Room empty, deleted.")
            return

        if room.host == seat.username:
            room.host = room.players[0].username
            print(f"[{room.room_id}] 👑 Host moved to {room.host}")
        print(f"[{room.room_id}] 🚪 {seat.username} left")
        broadcast_to_room(room, "playerLeft", {"username": seat.username, "host": room.host})


@socketio.on("leaveRoom")
@game_event()
def on_leave_room(data=None):
    sid = request.sid
    room = directory.room_for(sid)
    if not room:
        return
    remove_participant(room, sid)
    emit("leftRoom", {"roomId": room.room_id}, to=sid)


@socketio.on("sendEmoji")
@game_event()
def on_send_emoji(data):
    sid = request.sid
    room = require_room(sid)
    emoji = (data or {}).get("emoji")
    if not isinstance(emoji, str) or not emoji or len(emoji) > 16:
        raise RejectedInput("Invalid emoji")
    with room.lock:
        seat = require_seat(room, sid)
        broadcast_to_room(room, "emojiReceived", {
            "emoji": emoji,
            "seat": seat.role,
            "username": seat.username,
        })
