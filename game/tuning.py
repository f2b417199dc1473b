#!/usr/bin/env python3
"""
game/tuning.py
==============
Tunable gameplay parameters for the fruit catcher.  Every constant lives in
the frozen :class:`GameTuning` dataclass so that difficulty curves can be
swapped without touching the engine.

Two named tunings ship with the game:

* :data:`SKY_TUNING`: power-ups enabled, multiplicative speed growth
  (x1.05 per level).  This is the default.
* :data:`ARCADE_TUNING`: no power-ups, additive speed growth (+0.9 per
  level) with a little per-item speed jitter.

Also provides two stateless helpers:

* :func:`grow_speed`: apply one level of fall-speed growth.
* :func:`level_spawn_interval_ms`: spawn interval implied by a level.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from game.items import ARCADE_KIND_TABLE, SKY_KIND_TABLE, KindTable

GROWTH_MULTIPLICATIVE = "multiplicative"
GROWTH_ADDITIVE = "additive"
_GROWTH_MODES = (GROWTH_MULTIPLICATIVE, GROWTH_ADDITIVE)


@dataclass(frozen=True)
class GameTuning:
    """Immutable bag of every tunable gameplay parameter.

    Groups: round clock, playfield geometry, fall speed, spawn cadence,
    power-up durations, scoring, kind distribution.
    """

    name: str = "sky"

    # ── Round clock ───────────────────────────────────────────────────────
    round_seconds: int = 60
    """Length of a round in seconds."""

    level_up_at: Tuple[int, ...] = (40, 20)
    """Remaining-time values (exact) at which the level goes up."""

    # ── Playfield geometry (percent of height) ────────────────────────────
    spawn_y: float = 0.0
    """Vertical position new items start at."""

    catch_band_min: float = 85.0
    """Lower (exclusive) edge of the basket band."""

    catch_band_max: float = 95.0
    """Upper (exclusive) edge of the basket band."""

    floor_y: float = 100.0
    """Items below this line are dropped without penalty."""

    # ── Fall speed ────────────────────────────────────────────────────────
    base_fall_speed: float = 0.54
    """Fall speed at level 1, percent of height per normalised frame."""

    speed_growth_mode: str = GROWTH_MULTIPLICATIVE
    """How :attr:`speed_growth` is applied on level-up."""

    speed_growth: float = 1.05
    """Factor (multiplicative) or increment (additive) per level."""

    fall_speed_jitter: float = 0.0
    """Upper bound of the uniform random bonus added to each item's speed."""

    special_speed_factor: float = 0.5
    """Power-up items fall at this fraction of the base speed."""

    frame_ms: float = 16.66
    """Frame duration that counts as one normalised frame (60 Hz)."""

    slow_time_scale: float = 0.5
    """Extra time-scale multiplier while the slow effect is active."""

    # ── Spawn cadence ─────────────────────────────────────────────────────
    spawn_interval_ms: float = 1000.0
    """Spawn interval at level 1."""

    spawn_interval_step_ms: float = 200.0
    """Interval reduction per level-up."""

    min_spawn_interval_ms: float = 400.0
    """Floor of the level-derived spawn interval."""

    frenzy_spawn_interval_ms: float = 100.0
    """Spawn interval while the frenzy effect is active."""

    # ── Power-ups ─────────────────────────────────────────────────────────
    frenzy_duration_ms: float = 10_000.0
    slow_duration_ms: float = 10_000.0
    shield_duration_ms: float = 15_000.0

    per_frame_expiry: bool = False
    """Also clear expired effects on every frame, not only on second ticks."""

    # ── Scoring ───────────────────────────────────────────────────────────
    common_points: int = 100
    rare_points: int = 200

    # ── Kind distribution ─────────────────────────────────────────────────
    kind_table: KindTable = SKY_KIND_TABLE
    """Descending ``(threshold, kind)`` rows, see :func:`game.items.pick_kind`."""

    def __post_init__(self) -> None:
        if self.speed_growth_mode not in _GROWTH_MODES:
            raise ValueError(
                f"speed_growth_mode must be one of {_GROWTH_MODES}, "
                f"got {self.speed_growth_mode!r}"
            )
        if self.base_fall_speed <= 0.0:
            raise ValueError("base_fall_speed must be positive")
        if self.frame_ms <= 0.0:
            raise ValueError("frame_ms must be positive")
        if self.round_seconds <= 0:
            raise ValueError("round_seconds must be positive")
        if not 0.0 < self.min_spawn_interval_ms <= self.spawn_interval_ms:
            raise ValueError(
                "need 0 < min_spawn_interval_ms <= spawn_interval_ms"
            )
        if self.frenzy_spawn_interval_ms <= 0.0:
            raise ValueError("frenzy_spawn_interval_ms must be positive")
        if not self.catch_band_min < self.catch_band_max <= self.floor_y:
            raise ValueError(
                "need catch_band_min < catch_band_max <= floor_y"
            )
        _validate_kind_table(self.kind_table)


def _validate_kind_table(table: KindTable) -> None:
    if not table:
        raise ValueError("kind_table must not be empty")
    thresholds = [threshold for threshold, _ in table]
    if any(not 0.0 <= t < 1.0 for t in thresholds):
        raise ValueError("kind_table thresholds must lie in [0, 1)")
    if any(a <= b for a, b in zip(thresholds, thresholds[1:])):
        raise ValueError("kind_table thresholds must be strictly descending")
    if thresholds[-1] != 0.0:
        raise ValueError("kind_table must end with a 0.0 threshold")


SKY_TUNING = GameTuning()

ARCADE_TUNING = GameTuning(
    name="arcade",
    base_fall_speed=1.08,
    speed_growth_mode=GROWTH_ADDITIVE,
    speed_growth=0.9,
    fall_speed_jitter=0.2,
    kind_table=ARCADE_KIND_TABLE,
)

TUNINGS: Dict[str, GameTuning] = {
    SKY_TUNING.name: SKY_TUNING,
    ARCADE_TUNING.name: ARCADE_TUNING,
}


def get_tuning(name: str) -> GameTuning:
    """Look up a named tuning (case-insensitive)."""
    try:
        return TUNINGS[str(name).strip().lower()]
    except KeyError:
        raise ValueError(
            f"unknown tuning {name!r}; expected one of {sorted(TUNINGS)}"
        ) from None


def grow_speed(speed: float, tuning: GameTuning) -> float:
    """Fall speed after one level-up under *tuning*."""
    if tuning.speed_growth_mode == GROWTH_ADDITIVE:
        return speed + tuning.speed_growth
    return speed * tuning.speed_growth


def level_spawn_interval_ms(level: int, tuning: GameTuning) -> float:
    """Spawn interval implied by *level*: ``max(floor, base - (level-1)*step)``."""
    interval = tuning.spawn_interval_ms - (level - 1) * tuning.spawn_interval_step_ms
    return max(tuning.min_spawn_interval_ms, interval)
