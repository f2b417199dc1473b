"""
GameEvent: Data structure representing an event published on the EventBus.
"""

from dataclasses import dataclass


@dataclass
class GameEvent:
    """
    Represents a single event sent via the EventBus.

    Attributes:
        id (str): Unique identifier for the event.
        topic (str): The topic of the event (e.g., 'game.state', 'game.over').
        sender (str): ID of the publisher (e.g., 'bridge', 'api').
        payload (dict): Arbitrary dictionary containing event contents.
        ts (float): Timestamp (in seconds) when the event was created.
        seq (int): Bus-wide sequence number, strictly increasing.
    """
    id: str
    topic: str
    sender: str
    payload: dict
    ts: float
    seq: int = 0

    def as_dict(self) -> dict:
        """Return the event as a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "topic": self.topic,
            "sender": self.sender,
            "payload": dict(self.payload),
            "ts": self.ts,
            "seq": self.seq,
        }
