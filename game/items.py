#!/usr/bin/env python3
"""
game/items.py
=============
Falling item entities and the discrete kind distributions used by the
spawn policy.

A kind table is a tuple of ``(threshold, ItemKind)`` pairs sorted by
descending threshold.  :func:`pick_kind` resolves one uniform draw in
``[0, 1)`` against it: the first row whose threshold is ``<= draw`` wins.
The last row must have threshold ``0.0`` so every draw maps to a kind and
the implied probabilities sum to 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence, Tuple


class ItemKind(Enum):
    """Closed set of things that can fall into the playfield."""

    COMMON_FRUIT = "apple"
    RARE_FRUIT = "orange"
    HAZARD = "bomb"
    FRENZY = "watermelon"
    SLOW = "hourglass"
    SHIELD = "shield"

    @property
    def is_special(self) -> bool:
        """Power-up triggers: zero points, half fall speed."""
        return self in _SPECIAL_KINDS

    @property
    def is_fruit(self) -> bool:
        return self in (ItemKind.COMMON_FRUIT, ItemKind.RARE_FRUIT)


_SPECIAL_KINDS = frozenset({ItemKind.FRENZY, ItemKind.SLOW, ItemKind.SHIELD})

KindTable = Tuple[Tuple[float, ItemKind], ...]

# Watermelon 3%, hourglass 3%, shield 3%, bomb 10%, orange 20%, apple 61%.
SKY_KIND_TABLE: KindTable = (
    (0.97, ItemKind.FRENZY),
    (0.94, ItemKind.SLOW),
    (0.91, ItemKind.SHIELD),
    (0.81, ItemKind.HAZARD),
    (0.61, ItemKind.RARE_FRUIT),
    (0.0, ItemKind.COMMON_FRUIT),
)

# No power-ups: bomb 10%, orange 20%, apple 70%.
ARCADE_KIND_TABLE: KindTable = (
    (0.9, ItemKind.HAZARD),
    (0.7, ItemKind.RARE_FRUIT),
    (0.0, ItemKind.COMMON_FRUIT),
)


def pick_kind(draw: float, table: Sequence[Tuple[float, ItemKind]]) -> ItemKind:
    """Map a uniform draw in ``[0, 1)`` to a kind using *table*."""
    for threshold, kind in table:
        if draw >= threshold:
            return kind
    # Only reachable with a negative draw; the table floor is 0.0.
    return table[-1][1]


def kind_probabilities(table: Sequence[Tuple[float, ItemKind]]) -> Dict[ItemKind, float]:
    """Return the probability mass each row of *table* covers."""
    probs: Dict[ItemKind, float] = {}
    upper = 1.0
    for threshold, kind in table:
        probs[kind] = probs.get(kind, 0.0) + (upper - threshold)
        upper = threshold
    return probs


@dataclass
class Item:
    """A single falling entity.

    Attributes
    ----------
    id : str
        Diagnostic identifier (e.g. ``ITEM_0007``); never used for lookup.
    lane : int
        Lane index, 0 (left) to 2 (right).
    y : float
        Vertical position in percent of playfield height
        (0 = spawn edge, 100 = bottom edge).
    kind : ItemKind
        What the item is.
    points : int
        Score awarded on catch; 0 for bombs and power-ups.
    speed : float
        Fall speed in percent of height per normalised (16.66 ms) frame.
    """

    id: str
    lane: int
    y: float
    kind: ItemKind
    points: int
    speed: float

    def fall(self, time_scale: float) -> None:
        """Advance the item by *time_scale* normalised frames."""
        self.y += self.speed * time_scale

    def in_band(self, band_min: float, band_max: float) -> bool:
        """True while the item is strictly inside the basket band."""
        return band_min < self.y < band_max

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lane": self.lane,
            "y": round(self.y, 3),
            "kind": self.kind.value,
            "points": self.points,
            "speed": round(self.speed, 4),
        }
