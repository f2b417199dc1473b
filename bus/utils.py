"""
Utility functions for EventBus:
    - ID generation
    - payload snapshotting
"""

import copy
import uuid


# ---------- ID Helpers ----------
def new_event_id() -> str:
    """
    Generate a globally unique event ID.

    Returns:
        str: UUID string for a new event.
    """
    return str(uuid.uuid4())


# ---------- Payload Helpers ----------
def freeze_payload(payload: dict) -> dict:
    """
    Deep-copy a payload so later mutation by the publisher cannot leak into queued events.

    Args:
        payload (dict): Original event payload.

    Returns:
        dict: Independent copy of the payload.
    """
    return copy.deepcopy(payload)
