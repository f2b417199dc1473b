"""
bus: In-memory game event infrastructure
=========================================

Provides a lightweight pub/sub transport layer so the simulation driver can
notify pollers (HTTP API, demo runner) without knowing about them.

Modules
-------
message
    :class:`GameEvent` dataclass.
event_bus
    :class:`EventBus` publish / poll / subscribe transport.
metrics
    :class:`BusMetrics` counter snapshot.
utils
    ID generation, payload snapshotting.
"""

from .message import GameEvent
from .event_bus import EventBus
from .metrics import BusMetrics
from .utils import new_event_id, freeze_payload

__all__ = [
    "GameEvent",
    "EventBus",
    "BusMetrics",
    "new_event_id",
    "freeze_payload",
]
