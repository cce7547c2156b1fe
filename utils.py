# utils.py
import functools
import traceback
from typing import Any, Dict, Optional

from flask import request
from flask_socketio import emit

from errors import GameError, LedgerError, NotAuthorized, NotFound, RejectedInput, ResourceConflict
from extensions import socketio
from models import Room, Seat
from state import directory, matchmaking


def serialize_room_snapshot(room: Room, seat: Optional[Seat] = None) -> Dict[str, Any]:
    """Full room state for the `init` event."""
    return {
        "roomId": room.room_id,
        "seat": seat.role if seat else "spectator",
        "board": room.board.to_list(),
        "categories": room.categories.to_dict(),
        "turn": room.current_turn,
        "players": [p.to_dict() for p in room.players],
        "status": room.status,
        "host": room.host,
        "entryFee": room.entry_fee,
        "prize": room.prize,
        "league": room.league,
    }


def serialize_room_summary(room: Room) -> Dict[str, Any]:
    # the password itself is never echoed
    return {
        "id": room.room_id,
        "players": len(room.players),
        "status": room.status,
        "host": room.host,
        "hasPassword": bool(room.password),
        "entryFee": room.entry_fee,
    }


def public_room_list():
    return [serialize_room_summary(r) for r in directory.list_rooms() if not r.league]


def send_init(room: Room, seat: Seat):
    socketio.emit("init", serialize_room_snapshot(room, seat), to=seat.sid)


def broadcast_to_room(room: Room, event: str, payload: Dict[str, Any] = None):
    """Send to every participant of the room, in production order."""
    if payload is None:
        socketio.emit(event, to=room.room_id)
    else:
        socketio.emit(event, payload, to=room.room_id)


def emit_balances(room: Room, balances: Dict[str, int]):
    """balanceUpdate to each seated player, after the ledger is done."""
    for username, coins in balances.items():
        seat = room.seat_by_username(username)
        if not seat:
            continue
        sid = seat.sid
        try:
            socketio.emit("balanceUpdate", {"coins": coins}, to=sid)
        except Exception as e:
            print(f"⚠️ Failed to send balance to {username} ({sid}): {e}")


def broadcast_online_counts():
    socketio.emit("onlineCounts", matchmaking.counts())


def require_room(sid: str) -> Room:
    room = directory.room_for(sid)
    if not room:
        raise NotFound(f"No room for {sid}")
    return room


def require_seat(room: Room, sid: str) -> Seat:
    seat = room.seat_by_sid(sid)
    if not seat:
        raise NotFound(f"{sid} is not seated in {room.room_id}")
    return seat


def game_event(rejected_event: str = "error"):
    """Translate GameError subclasses raised by a socket handler into replies.

    RejectedInput goes back on `rejected_event`, ResourceConflict and ledger
    failures as `error`, NotAuthorized/NotFound are logged only.
    """
    def decorator(handler):
        @functools.wraps(handler)
        def wrapper(*args, **kwargs):
            sid = request.sid
            try:
                return handler(*args, **kwargs)
            except RejectedInput as e:
                if rejected_event == "moveRejected":
                    emit("moveRejected", {"reason": e.message}, to=sid)
                else:
                    emit(rejected_event, {"message": e.message}, to=sid)
            except ResourceConflict as e:
                emit("error", {"message": e.message}, to=sid)
            except LedgerError as e:
                print(f"❌ [{handler.__name__}] {e}")
                emit("error", {"message": "Account service unavailable"}, to=sid)
            except (NotAuthorized, NotFound) as e:
                print(f"🚫 [{handler.__name__}] ignored: {e.message}")
            except GameError as e:
                emit("error", {"message": e.message}, to=sid)
            except Exception as e:
                print(f"❌ Error in {handler.__name__}: {e}")
                traceback.print_exc()
                emit("error", {"message": "Internal server error"}, to=sid)
        return wrapper
    return decorator
