# ledger.py
"""Account ledger: coin balances and win/loss counters keyed by username."""
from abc import ABC, abstractmethod
from threading import Lock
from typing import Any, Dict, List, Literal

from errors import LedgerError

Result = Literal["win", "loss"]


class Ledger(ABC):
    @abstractmethod
    def get_balance(self, username: str) -> int:
        pass

    @abstractmethod
    def adjust_balance(self, username: str, delta: int) -> int:
        """Apply `delta` and return the new balance."""
        pass

    @abstractmethod
    def record_result(self, username: str, result: Result) -> None:
        pass

    @abstractmethod
    def leaderboard(self, limit: int = 20) -> List[Dict[str, Any]]:
        pass


class MemoryLedger(Ledger):
    def __init__(self, starting_coins: int = 100, accounts: Dict[str, int] = None):
        self.starting_coins = starting_coins
        self._lock = Lock()
        self._accounts: Dict[str, Dict[str, int]] = {}
        for username, coins in (accounts or {}).items():
            self._accounts[username] = {"coins": coins, "wins": 0, "losses": 0}

    def _account(self, username: str) -> Dict[str, int]:
        if username not in self._accounts:
            self._accounts[username] = {"coins": self.starting_coins, "wins": 0, "losses": 0}
        return self._accounts[username]

    def get_balance(self, username: str) -> int:
        with self._lock:
            return self._account(username)["coins"]

    def adjust_balance(self, username: str, delta: int) -> int:
        with self._lock:
            account = self._account(username)
            account["coins"] += delta
            return account["coins"]

    def record_result(self, username: str, result: Result) -> None:
        with self._lock:
            self._account(username)["wins" if result == "win" else "losses"] += 1

    def stats(self, username: str) -> Dict[str, int]:
        with self._lock:
            return dict(self._account(username))

    def leaderboard(self, limit: int = 20) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [{"username": name, **account} for name, account in self._accounts.items()]
        rows.sort(key=lambda r: r["coins"], reverse=True)
        return rows[:limit]


class FirestoreLedger(Ledger):
    """users/{username} documents with coins, wins and losses."""

    def __init__(self, db=None, service_key_path: str = None):
        self._db = db
        self._service_key_path = service_key_path

    @property
    def db(self):
        if self._db is None:
            from firebase_admin_config import get_db
            self._db = get_db(self._service_key_path)
            if self._db is None:
                raise LedgerError("connect", "-", RuntimeError("Firestore unavailable"))
        return self._db

    def _user_ref(self, username: str):
        return self.db.collection("users").document(username)

    def get_balance(self, username: str) -> int:
        try:
            doc = self._user_ref(username).get()
        except LedgerError:
            raise
        except Exception as e:
            raise LedgerError("get_balance", username, e)
        if not doc.exists:
            return 0
        return int((doc.to_dict() or {}).get("coins", 0))

    def adjust_balance(self, username: str, delta: int) -> int:
        from firebase_admin import firestore as admin_firestore
        try:
            user_ref = self._user_ref(username)
            user_ref.set({"coins": admin_firestore.Increment(delta)}, merge=True)
            doc = user_ref.get()
        except LedgerError:
            raise
        except Exception as e:
            raise LedgerError("adjust_balance", username, e)
        print(f"💰 Firestore updated: {username} {delta:+d}")
        return int((doc.to_dict() or {}).get("coins", 0))

    def record_result(self, username: str, result: Result) -> None:
        from firebase_admin import firestore as admin_firestore
        field = "wins" if result == "win" else "losses"
        try:
            self._user_ref(username).set({field: admin_firestore.Increment(1)}, merge=True)
        except LedgerError:
            raise
        except Exception as e:
            raise LedgerError("record_result", username, e)

    def leaderboard(self, limit: int = 20) -> List[Dict[str, Any]]:
        from firebase_admin import firestore as admin_firestore
        try:
            query = (
                self.db.collection("users")
                .order_by("coins", direction=admin_firestore.Query.DESCENDING)
                .limit(limit)
            )
            docs = list(query.stream())
        except LedgerError:
            raise
        except Exception as e:
            raise LedgerError("leaderboard", "-", e)
        rows = []
        for doc in docs:
            data = doc.to_dict() or {}
            rows.append({
                "username": doc.id,
                "coins": data.get("coins", 0),
                "wins": data.get("wins", 0),
                "losses": data.get("losses", 0),
            })
        return rows


_ledger: Ledger = None


def init_ledger(config) -> Ledger:
    global _ledger
    backend = getattr(config, "LEDGER_BACKEND", "memory")
    if backend == "firestore":
        _ledger = FirestoreLedger(service_key_path=getattr(config, "FIREBASE_CREDENTIALS", None) or None)
    else:
        _ledger = MemoryLedger(starting_coins=getattr(config, "STARTING_COINS", 100))
    print(f"🏦 Ledger backend: {backend}")
    return _ledger


def set_ledger(ledger: Ledger):
    global _ledger
    _ledger = ledger


def get_ledger() -> Ledger:
    global _ledger
    if _ledger is None:
        from config import Config
        init_ledger(Config)
    return _ledger
