"""
EventBus: In-memory pub/sub system for game notifications.

Supports:
    - Topic-based event queues, bounded per topic
    - Polling (pull) and listener callbacks (push)
    - Logging and counters of event flow

Intended usage:
    - The game bridge publishes 'game.state' on every score/time change
      and 'game.over' once per round
    - The HTTP API and the demo poll those topics
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, List

from .message import GameEvent
from .metrics import BusMetrics
from .utils import freeze_payload, new_event_id

log = logging.getLogger(__name__)

EventListener = Callable[[GameEvent], None]


class EventBus:
    """
    Transport layer for game events.

    Attributes:
        max_queue (int): Maximum number of undelivered events kept per topic.
        metrics (BusMetrics): Counters describing the event flow.
    """

    def __init__(self, max_queue: int = 256):
        """
        Initialize an EventBus instance.

        Args:
            max_queue (int): Per-topic queue length; the oldest event is dropped when full.
        """
        if max_queue < 1:
            raise ValueError("max_queue must be at least 1")
        self.max_queue = max_queue
        self.metrics = BusMetrics()
        self._topics: Dict[str, Deque[GameEvent]] = {}
        self._listeners: Dict[str, List[EventListener]] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def publish(self, topic: str, sender: str, payload: dict) -> str:
        """
        Publish an event to a specific topic.

        Args:
            topic (str): The topic name (e.g., 'game.state', 'game.over').
            sender (str): ID of the publisher.
            payload (dict): Arbitrary data dictionary representing the event contents.

        Returns:
            str: The unique event ID.
        """
        with self._lock:
            self._seq += 1
            event = GameEvent(
                id=new_event_id(),
                topic=topic,
                sender=sender,
                payload=freeze_payload(payload),
                ts=time.time(),
                seq=self._seq,
            )
            queue = self._topics.setdefault(topic, deque())
            if len(queue) >= self.max_queue:
                dropped = queue.popleft()
                self.metrics.dropped += 1
                log.warning("event_dropped topic=%s seq=%d", topic, dropped.seq)
            queue.append(event)
            self.metrics.published += 1
            listeners = list(self._listeners.get(topic, ()))

        log.debug("publish topic=%s sender=%s seq=%d", topic, sender, event.seq)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                self.metrics.listener_errors += 1
                log.exception("listener failed on topic=%s", topic)
        return event.id

    def poll(self, topic: str) -> List[GameEvent]:
        """
        Retrieve and clear all events from a given topic.

        Args:
            topic (str): The topic name to poll events from.

        Returns:
            List[GameEvent]: Events published to the topic since the last poll, oldest first.
        """
        with self._lock:
            queue = self._topics.get(topic)
            if not queue:
                return []
            events = list(queue)
            queue.clear()
            self.metrics.delivered += len(events)
        return events

    def subscribe(self, topic: str, listener: EventListener) -> None:
        """
        Register a callback invoked synchronously for every event published on a topic.

        Args:
            topic (str): The topic name.
            listener (Callable[[GameEvent], None]): Callback receiving the event.
        """
        with self._lock:
            self._listeners.setdefault(topic, []).append(listener)

    def pending(self, topic: str) -> int:
        """
        Count undelivered events on a topic without consuming them.

        Args:
            topic (str): The topic name.

        Returns:
            int: Number of queued events.
        """
        with self._lock:
            return len(self._topics.get(topic, ()))
