"""
errors — exception hierarchy for the session server
===================================================

Domain code raises these; the socket layer (utils.game_event) decides
who hears about them and how.
"""

from __future__ import annotations


class GameError(Exception):
    """Base exception for all session server errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RejectedInput(GameError):
    """Malformed or illegal request. Reported to the submitter only."""
    pass


class ResourceConflict(GameError):
    """Room full, room exists, insufficient funds, wrong password..."""
    pass


class NotAuthorized(GameError):
    """A non-host issued a host-only command. Ignored."""
    pass


class NotFound(GameError):
    """Room, session or queue entry is absent. Treated as a no-op."""
    pass


class LedgerError(GameError):
    """The account ledger could not complete a read or a mutation."""

    def __init__(self, operation: str, username: str, cause: Exception = None):
        self.operation = operation
        self.username = username
        self.cause = cause
        super().__init__(f"Ledger {operation} failed for {username}: {cause}")
