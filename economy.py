# economy.py
"""Entry fees, league costs and match settlement.

Every function returns {username: new_balance} for the balances it
touched so the caller can send balanceUpdate once the ledger is done.
"""
from typing import Dict, Optional

from errors import LedgerError, ResourceConflict
from ledger import get_ledger
from models import Room, Seat, Tier


def check_creation_fee(username: str, entry_fee: int) -> None:
    if entry_fee <= 0:
        return
    if get_ledger().get_balance(username) < entry_fee:
        raise ResourceConflict("Insufficient coins for entry fee!")


def collect_entry_fees(room: Room, joiner: str) -> Dict[str, int]:
    """Debit joiner and host. Both balances are checked before any debit."""
    fee = room.entry_fee
    if fee <= 0:
        return {}

    ledger = get_ledger()
    if ledger.get_balance(joiner) < fee:
        raise ResourceConflict(f"This room requires {fee} coins!")
    if room.host and ledger.get_balance(room.host) < fee:
        raise ResourceConflict("The host can no longer cover the entry fee")

    balances = {joiner: ledger.adjust_balance(joiner, -fee)}
    if room.host:
        try:
            balances[room.host] = ledger.adjust_balance(room.host, -fee)
        except LedgerError:
            # Undo the joiner debit so a failed join costs nothing
            print(f"[{room.room_id}] ❌ Host debit failed, refunding {fee} to {joiner}")
            ledger.adjust_balance(joiner, fee)
            raise
    room.prize = fee * 2
    print(f"[{room.room_id}] 💸 Entry fee {fee} collected from {joiner} and {room.host}. Prize: {room.prize}")
    return balances


def charge_league_entry(username: str, tier: Tier) -> int:
    ledger = get_ledger()
    if ledger.get_balance(username) < tier.cost:
        raise ResourceConflict("Insufficient coins!")
    return ledger.adjust_balance(username, -tier.cost)


def refund_league_entry(username: str, tier: Tier) -> Optional[int]:
    try:
        return get_ledger().adjust_balance(username, tier.cost)
    except LedgerError as e:
        print(f"❌ Refund of {tier.cost} to {username} failed: {e}")
        return None


def _record(username: str, result: str) -> None:
    try:
        get_ledger().record_result(username, result)
    except LedgerError as e:
        print(f"❌ Could not record {result} for {username}: {e}")


def _credit(balances: Dict[str, int], username: str, amount: int) -> None:
    try:
        balances[username] = get_ledger().adjust_balance(username, amount)
    except LedgerError as e:
        print(f"❌ Could not credit {amount} to {username}: {e}")


def settle_win(room: Room, winner: Seat, loser_username: Optional[str]) -> Dict[str, int]:
    """Winner takes the prize pool; win/loss counters for both sides.

    Also used for forfeits, where the loser has already left the room.
    """
    balances: Dict[str, int] = {}
    prize, room.prize = room.prize, 0

    _record(winner.username, "win")
    if loser_username:
        _record(loser_username, "loss")
    if prize:
        _credit(balances, winner.username, prize)

    print(f"[{room.room_id}] 🏆 Settled: {winner.username} wins {prize}, loser {loser_username}")
    return balances


def settle_draw(room: Room) -> Dict[str, int]:
    """Refund the entry fee to each participant when one was charged."""
    balances: Dict[str, int] = {}
    fee_charged = room.entry_fee > 0 and room.prize > 0
    room.prize = 0
    if fee_charged:
        for seat in room.players:
            _credit(balances, seat.username, room.entry_fee)
    print(f"[{room.room_id}] 🤝 Draw settled. Refunded: {list(balances)}")
    return balances
