# general_events.py
import traceback

from flask import request
from flask_socketio import emit

from extensions import socketio
from lobby_events import remove_participant
from state import directory, matchmaking
from utils import broadcast_online_counts, public_room_list


@socketio.on("connect")
def on_connect(auth=None):
    print("🟢 connect:", request.sid)
    broadcast_online_counts()


@socketio.on("disconnect")
def on_disconnect(reason=None):
    sid = request.sid
    print("🔴 disconnect:", sid, f"({reason})" if reason else "")

    # Queue entry fees are not refunded on disconnect
    with matchmaking.lock:
        removed = matchmaking.remove(sid)
    if removed:
        print(f"👋 {sid} removed from {[e.tier for e in removed]} queue")
        broadcast_online_counts()

    room = directory.room_for(sid)
    if room:
        try:
            remove_participant(room, sid, disconnected=True)
        except Exception as e:
            print(f"❌ Error cleaning up {sid} in {room.room_id}: {e}")
            traceback.print_exc()

    directory.drop(sid)


@socketio.on("getRooms")
def on_get_rooms(data=None):
    emit("roomList", public_room_list())
