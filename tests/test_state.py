import threading

import pytest

from models import Categories, Room, Seat
from state import SessionDirectory


def make_room(room_id="R"):
    return Room(room_id=room_id, categories=Categories(rows=["a", "b", "c"], cols=["d", "e", "f"]))


def test_room_ids_are_unique():
    directory = SessionDirectory()
    first = make_room("Arena")
    assert directory.add_room(first)
    assert not directory.add_room(make_room("Arena"))
    assert directory.get_room("Arena") is first


def test_session_room_binding():
    directory = SessionDirectory()
    room = make_room("Arena")
    directory.add_room(room)
    directory.bind("sid1", "alice")
    directory.set_room("sid1", "Arena")
    assert directory.room_for("sid1") is room

    # clearing for another room leaves the binding alone
    directory.clear_room("sid1", "Elsewhere")
    assert directory.room_for("sid1") is room
    directory.clear_room("sid1", "Arena")
    assert directory.room_for("sid1") is None

    assert directory.drop("sid1").username == "alice"
    assert directory.get("sid1") is None


def test_remove_room_cancels_pending_reset():
    directory = SessionDirectory()
    room = make_room()
    directory.add_room(room)
    fired = threading.Event()
    room.reset_timer = threading.Timer(10, fired.set)
    room.reset_timer.start()

    directory.remove_room(room)
    assert directory.get_room(room.room_id) is None
    assert room.reset_timer is None
    assert not fired.is_set()


def test_room_transitions_need_two_players():
    room = make_room()
    room.players.append(Seat("s1", "alice", "seat1"))
    with pytest.raises(ValueError):
        room.transition("playing")
    room.players.append(Seat("s2", "bob", room.free_role()))
    assert room.players[1].role == "seat2"
    room.transition("playing")
    room.transition("finished")
    room.transition("waiting")
    assert room.status == "waiting"


def test_claim_room_seats_a_connection_once():
    directory = SessionDirectory()
    assert directory.claim_room("sid1", "alice", "Arena")
    assert not directory.claim_room("sid1", "alice", "Second")
    assert directory.get("sid1").room_id == "Arena"

    directory.clear_room("sid1", "Arena")
    assert directory.claim_room("sid1", "alice", "Second")
