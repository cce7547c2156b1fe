from abc import ABC, abstractmethod


class GameHandler(ABC):
    """Game rules for one kind of room. Callers hold `room.lock`."""

    @abstractmethod
    def start_game(self, room):
        pass

    @abstractmethod
    def handle_action(self, room, action: str, data: dict, sid: str):
        pass

    @abstractmethod
    def on_leave(self, room, seat) -> bool:
        """Called before `seat` is removed. Returns True if the match was forfeited."""
        pass
