#!/usr/bin/env python3
"""
game/lanes.py
=============
Lane helpers used by :mod:`game.engine` and :mod:`game.game_bridge`.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.
"""

from __future__ import annotations

from typing import Optional, Tuple

LANE_LEFT: int = 0
LANE_CENTER: int = 1
LANE_RIGHT: int = 2
LANES: Tuple[int, ...] = (LANE_LEFT, LANE_CENTER, LANE_RIGHT)

LANE_NAMES: Tuple[str, ...] = ("left", "center", "right")


def lane_from_label(label: str) -> Optional[int]:
    """Classify a free-form pose label into a lane.

    The label is lower-cased and matched by substring, in this order:
    ``left`` → 0, ``right`` → 2, ``center`` / ``middle`` → 1.

    Returns
    -------
    int or None
        The lane index, or *None* when nothing matches (e.g. ``"STANDING"``).
    """
    name = str(label).lower()
    if "left" in name:
        return LANE_LEFT
    if "right" in name:
        return LANE_RIGHT
    if "center" in name or "middle" in name:
        return LANE_CENTER
    return None


def lane_name(lane: int) -> str:
    """Human-readable name of *lane* (``"left"`` / ``"center"`` / ``"right"``)."""
    return LANE_NAMES[lane]
