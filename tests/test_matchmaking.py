from matchmaking import MatchmakingQueue, QueueEntry
from models import LEAGUES


def test_pairs_with_oldest_waiter_first():
    queue = MatchmakingQueue(LEAGUES)
    assert queue.pair_or_enqueue(QueueEntry("s1", "alice", "amateur")) is None
    assert queue.pair_or_enqueue(QueueEntry("s2", "bob", "amateur")).username == "alice"
    assert queue.pair_or_enqueue(QueueEntry("s3", "carol", "amateur")) is None
    assert queue.pair_or_enqueue(QueueEntry("s4", "dave", "amateur")).username == "carol"
    assert queue.counts() == {"amateur": 0, "pro": 0, "elite": 0}


def test_tiers_do_not_mix():
    queue = MatchmakingQueue(LEAGUES)
    queue.pair_or_enqueue(QueueEntry("s1", "alice", "amateur"))
    assert queue.pair_or_enqueue(QueueEntry("s2", "bob", "elite")) is None
    assert queue.counts() == {"amateur": 1, "pro": 0, "elite": 1}


def test_remove_drops_every_entry_for_the_connection():
    queue = MatchmakingQueue(LEAGUES)
    queue.pair_or_enqueue(QueueEntry("s1", "alice", "amateur"))
    queue.pair_or_enqueue(QueueEntry("s1", "alice", "pro"))
    queue.pair_or_enqueue(QueueEntry("s2", "bob", "elite"))

    removed = queue.remove("s1")
    assert sorted(e.tier for e in removed) == ["amateur", "pro"]
    assert queue.counts() == {"amateur": 0, "pro": 0, "elite": 1}
    assert queue.remove("nobody") == []


def test_find_by_sid_or_username():
    queue = MatchmakingQueue(LEAGUES)
    queue.pair_or_enqueue(QueueEntry("s1", "alice", "pro"))
    assert queue.find(sid="s1").username == "alice"
    assert queue.find(username="alice").sid == "s1"
    assert queue.find(sid="s2") is None
    assert queue.has_tier("pro") and not queue.has_tier("legend")
