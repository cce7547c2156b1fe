# game_events.py
from flask import request

from extensions import socketio
from handlers.grid_handler import grid_handler as handler
from utils import game_event, require_room


@socketio.on("getOptions")
@game_event()
def on_get_options(data):
    sid = request.sid
    room = require_room(sid)
    with room.lock:
        handler.handle_action(room, "get_options", data or {}, sid)


@socketio.on("makeMove")
@game_event(rejected_event="moveRejected")
def on_make_move(data):
    sid = request.sid
    room = require_room(sid)
    with room.lock:
        handler.handle_action(room, "make_move", data or {}, sid)
