import os
import random
import sys
import time

import pytest

# Ensure the project root (flat modules) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from extensions import socketio
from ledger import MemoryLedger, set_ledger
from main import create_app
from state import directory, matchmaking
from trivia import TriviaOracle, set_oracle

ROWS = ["R1", "R2", "R3"]
COLS = ["C1", "C2", "C3"]


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ALLOWED_ORIGINS = '*'
    RESET_DELAY_SECONDS = 0.2
    LEDGER_BACKEND = 'memory'
    STARTING_COINS = 100
    DATA_DIR = os.path.join(PROJECT_ROOT, 'data')


def make_oracle(seed=7):
    """One footballer per (row, col) pair named "<row>-<col>", plus decoys."""
    players = [{"name": f"{r}-{c}", "teams": [r, c]} for r in ROWS for c in COLS]
    players.append({"name": "Alt R1-C1", "teams": ["R1", "C1"]})
    players += [{"name": f"Decoy {i}", "teams": ["Elsewhere"]} for i in range(1, 5)]
    scenario = {
        "rows": ROWS,
        "cols": COLS,
        "answers": {f"{r}|{c}": f"{r}-{c}" for r in ROWS for c in COLS},
    }
    return TriviaOracle(
        players,
        games=[{"rows": ROWS, "potentialCols": COLS}],
        scenarios=[scenario],
        rng=random.Random(seed),
    )


def answer_for(init, row, col):
    categories = init["categories"]
    return f"{categories['rows'][row]}-{categories['cols'][col]}"


class Player:
    """A connected test client plus everything it has received so far."""

    def __init__(self, app, username):
        self.username = username
        self.client = socketio.test_client(app, flask_test_client=app.test_client())
        self.inbox = []

    def send(self, event, payload=None):
        data = dict(payload or {})
        data.setdefault("username", self.username)
        self.client.emit(event, data)

    def _drain(self):
        if self.client.is_connected():
            self.inbox.extend(self.client.get_received())

    def received(self, name):
        self._drain()
        return [pkt["args"][0] if pkt["args"] else None for pkt in self.inbox if pkt["name"] == name]

    def last(self, name):
        events = self.received(name)
        assert events, f"{self.username} never received {name}"
        return events[-1]

    def wait_for(self, name, timeout=3.0):
        deadline = time.time() + timeout
        while time.time() < deadline:
            events = self.received(name)
            if events:
                return events[-1]
            time.sleep(0.05)
        raise AssertionError(f"{self.username} did not receive {name} within {timeout}s")

    def clear(self):
        self._drain()
        self.inbox = []


@pytest.fixture()
def app():
    directory.clear()
    matchmaking.clear()
    application = create_app(TestConfig)
    set_oracle(make_oracle())
    yield application
    directory.clear()
    matchmaking.clear()


@pytest.fixture()
def ledger(app):
    book = MemoryLedger(starting_coins=100)
    set_ledger(book)
    return book


@pytest.fixture()
def connect(app, ledger):
    players = []

    def _connect(username):
        player = Player(app, username)
        players.append(player)
        return player

    yield _connect
    for player in players:
        if player.client.is_connected():
            player.client.disconnect()


@pytest.fixture()
def custom_game(connect):
    """alice hosts "Arena" (seat1), bob joins (seat2), alice starts."""
    def _start(entry_fee=0):
        host = connect("alice")
        guest = connect("bob")
        host.send("createRoom", {"name": "Arena", "entryFee": entry_fee})
        guest.send("joinRoom", {"roomId": "Arena"})
        host.send("startGame")
        return host, guest, host.last("init")
    return _start


@pytest.fixture()
def league_match(connect):
    """alice waits in amateur, bob pairs with her. Both accept unless told not to."""
    def _match(accept=True):
        first = connect("alice")
        second = connect("bob")
        first.send("joinLeague", {"tier": "amateur"})
        second.send("joinLeague", {"tier": "amateur"})
        room_id = first.last("roomJoined")["roomId"]
        if accept:
            first.send("acceptMatch")
            second.send("acceptMatch")
        return first, second, directory.get_room(room_id)
    return _match
