# matchmaking.py
import time
from collections import deque
from dataclasses import dataclass, field
from threading import RLock
from typing import Deque, Dict, List, Optional

from models import Tier


@dataclass
class QueueEntry:
    sid: str
    username: str
    tier: str
    joined_at: float = field(default_factory=time.time)


class MatchmakingQueue:
    """Per-tier FIFO of waiting players.

    `lock` is re-entrant so callers can hold it across a balance check,
    the enqueue and the creation of the paired room.
    """

    def __init__(self, tiers: Dict[str, Tier]):
        self.tiers = tiers
        self.lock = RLock()
        self._queues: Dict[str, Deque[QueueEntry]] = {name: deque() for name in tiers}

    def has_tier(self, tier: str) -> bool:
        return tier in self._queues

    def find(self, sid: str = None, username: str = None) -> Optional[QueueEntry]:
        with self.lock:
            for queue in self._queues.values():
                for entry in queue:
                    if (sid and entry.sid == sid) or (username and entry.username == username):
                        return entry
        return None

    def pair_or_enqueue(self, entry: QueueEntry) -> Optional[QueueEntry]:
        """Return the oldest waiter of the tier, or queue `entry` and return None."""
        with self.lock:
            queue = self._queues[entry.tier]
            if queue:
                return queue.popleft()
            queue.append(entry)
            return None

    def remove(self, sid: str) -> List[QueueEntry]:
        """Drop every entry of `sid` from every tier."""
        removed: List[QueueEntry] = []
        with self.lock:
            for name, queue in self._queues.items():
                kept = deque()
                for entry in queue:
                    if entry.sid == sid:
                        removed.append(entry)
                    else:
                        kept.append(entry)
                self._queues[name] = kept
        return removed

    def counts(self) -> Dict[str, int]:
        with self.lock:
            return {name: len(queue) for name, queue in self._queues.items()}

    def clear(self):
        with self.lock:
            for name in self._queues:
                self._queues[name] = deque()
