from threading import Timer

from flask import current_app
from flask_socketio import emit

from board_logic import Board
from economy import settle_draw, settle_win
from errors import RejectedInput
from extensions import socketio
from handlers.base_handler import GameHandler
from models import MAX_PLAYERS, other_seat
from state import directory
from trivia import get_oracle
from utils import broadcast_to_room, emit_balances, require_seat

DEFAULT_RESET_DELAY = 5


class GridHandler(GameHandler):
    """3x3 trivia grid: a cell is claimed by naming a footballer who fits both labels."""

    def start_game(self, room):
        room.cancel_reset()
        room.transition("playing")
        room.current_turn = "seat1"
        print(f"[{room.room_id}] 🎮 Game started: {[p.username for p in room.players]}")
        broadcast_to_room(room, "gameStarted", {"roomId": room.room_id, "turn": room.current_turn})

    def handle_action(self, room, action: str, data: dict, sid: str):
        if action == "make_move":
            self._make_move(room, data, sid)
        elif action == "get_options":
            self._get_options(room, data, sid)

    # --- moves ---

    def _make_move(self, room, data: dict, sid: str):
        seat = require_seat(room, sid)
        row, col, answer = data.get("row"), data.get("col"), data.get("answer")

        # Any rejection leaves board, used answers and turn untouched
        if room.status != "playing":
            raise RejectedInput("Game not started")
        if seat.role != room.current_turn:
            raise RejectedInput("Not your turn")
        if not Board.in_bounds(row, col):
            raise RejectedInput("Invalid position")
        if not room.board.is_empty(row, col):
            raise RejectedInput("Cell is already occupied")
        if not isinstance(answer, str) or not answer.strip():
            raise RejectedInput("Answer is required")
        if answer in room.used_answers:
            raise RejectedInput("Footballer used")

        if not get_oracle().is_correct(room.categories, row, col, answer):
            print(f"[{room.room_id}] ❌ {seat.username} missed ({row},{col}) with {answer}")
            broadcast_to_room(room, "moveMissed", {
                "seat": seat.role,
                "answer": answer,
                "row": row,
                "col": col,
            })
            self._pass_turn(room)
            return

        room.board.place(row, col, seat.role, answer)
        room.used_answers.add(answer)
        outcome = room.board.evaluate()

        broadcast_to_room(room, "moveAccepted", {
            "row": row,
            "col": col,
            "answer": answer,
            "by": seat.role,
            "board": room.board.to_list(),
        })

        if outcome:
            self._handle_game_over(room, outcome)
        else:
            self._pass_turn(room)

    def _pass_turn(self, room):
        room.current_turn = other_seat(room.current_turn)
        broadcast_to_room(room, "turnChanged", {"seat": room.current_turn})

    def _get_options(self, room, data: dict, sid: str):
        require_seat(room, sid)
        row, col = data.get("row"), data.get("col")
        if not Board.in_bounds(row, col):
            raise RejectedInput("Invalid position")
        candidates = get_oracle().options(room.categories, row, col, room.used_answers)
        emit("options", {"row": row, "col": col, "candidates": candidates}, to=sid)

    # --- game over ---

    def _handle_game_over(self, room, outcome):
        room.transition("finished")
        payload = outcome.to_dict()
        payload.update({"board": room.board.to_list(), "prize": room.prize})
        print(f"[{room.room_id}] 🏁 Game over: {payload['winner']}")
        broadcast_to_room(room, "gameOver", payload)

        # Outcome is final before any ledger call
        if outcome.draw:
            balances = settle_draw(room)
        else:
            winner = room.seat_by_role(outcome.winner)
            loser = room.seat_by_role(other_seat(outcome.winner))
            balances = settle_win(room, winner, loser.username if loser else None)
        emit_balances(room, balances)

        self.schedule_reset(room, "playing")

    def on_leave(self, room, seat) -> bool:
        if room.status != "playing":
            return False
        winner = next((p for p in room.players if p is not seat), None)
        if not winner:
            return False

        print(f"[{room.room_id}] 🏳️ {seat.username} left an active game. Forfeit! Winner: {winner.username}")
        room.transition("finished")
        socketio.emit("gameOver", {
            "winner": winner.role,
            "winningCells": None,
            "board": room.board.to_list(),
            "prize": room.prize,
            "reason": "opponent_left",
        }, to=winner.sid)

        balances = settle_win(room, winner, seat.username)
        emit_balances(room, balances)

        # A forfeited match goes back to the lobby
        self.schedule_reset(room, "waiting")
        return True

    # --- reset timer ---

    def schedule_reset(self, room, status_after: str):
        room.cancel_reset()
        delay = current_app.config.get("RESET_DELAY_SECONDS", DEFAULT_RESET_DELAY)
        timer = Timer(delay, lambda: self._reset(room, timer, status_after))
        timer.daemon = True
        room.reset_timer = timer
        timer.start()

    def _reset(self, room, timer, status_after: str):
        with room.lock:
            if directory.get_room(room.room_id) is not room or room.reset_timer is not timer:
                print(f"[{room.room_id}] Reset ignored: room deleted or timer replaced.")
                return
            room.reset_timer = None

            room.board.reset()
            room.current_turn = "seat1"
            room.used_answers.clear()
            room.accepted.clear()
            target = status_after if len(room.players) == MAX_PLAYERS else "waiting"
            if room.status != target:
                room.transition(target)

            print(f"[{room.room_id}] 🔄 Room reset -> {room.status}")
            broadcast_to_room(room, "gameReset", {
                "board": room.board.to_list(),
                "turn": room.current_turn,
                "status": room.status,
            })


# Shared by the lobby and game event modules
grid_handler = GridHandler()
