#!/usr/bin/env python3
"""
game/engine.py
==============
Time-driven simulation of one fruit-catcher round.

:class:`GameSimulation` owns every piece of mutable game state: score,
level, round clock, the player's lane, the live :class:`~game.items.Item`
list and the three power-up timers.  It never schedules anything itself;
two external drivers advance it:

* :meth:`GameSimulation.tick`: once per rendered frame with a variable
  ``delta_ms`` and the current ``now_ms``.  Spawns items, moves them and
  resolves catches.
* :meth:`GameSimulation.tick_second`: once per wall-clock second.
  Counts the round down, levels up and expires power-ups.

Presentation layers observe the round through listeners registered with
:meth:`GameSimulation.subscribe` and read the public attributes (or
:meth:`GameSimulation.snapshot`) between ticks.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional

from game.items import Item, ItemKind, pick_kind
from game.lanes import LANE_CENTER, LANES, lane_from_label, lane_name
from game.tuning import (
    SKY_TUNING,
    GameTuning,
    grow_speed,
    level_spawn_interval_ms,
)

log = logging.getLogger("engine")

ScoreListener = Callable[[int, int, int], None]
"""Called with ``(score, level, time_remaining)``."""

GameEndListener = Callable[[int, int], None]
"""Called with ``(final_score, final_level)``."""


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000.0


class GameSimulation:
    """State machine for a single-player, three-lane catching round.

    Parameters
    ----------
    tuning : GameTuning or None
        Gameplay constants; uses :data:`~game.tuning.SKY_TUNING` when *None*.
    seed : int or None
        Random seed for reproducible spawns.
    clock : callable or None
        Returns the current time in ms.  Only consulted by
        :meth:`tick_second` when no ``now_ms`` is passed; must share its
        time base with the ``now_ms`` values given to :meth:`tick`.
    on_score_change, on_game_end : callable or None
        Optional listeners, same as calling :meth:`subscribe`.
    """

    def __init__(
        self,
        tuning: Optional[GameTuning] = None,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
        on_score_change: Optional[ScoreListener] = None,
        on_game_end: Optional[GameEndListener] = None,
    ) -> None:
        self.tuning = tuning or SKY_TUNING
        self._rng = random.Random(seed)
        self._clock = clock or monotonic_ms
        self._score_listeners: List[ScoreListener] = []
        self._end_listeners: List[GameEndListener] = []
        self._item_seq: int = 0
        self._active: bool = False
        self.subscribe(on_score_change=on_score_change, on_game_end=on_game_end)
        self._reset_state()

    # ── initialisation / reset ────────────────────────────────────────────

    def _reset_state(self) -> None:
        self.score: int = 0
        self.level: int = 1
        self.time_remaining: int = self.tuning.round_seconds
        self.player_lane: int = LANE_CENTER
        self.fall_speed: float = self.tuning.base_fall_speed
        self.spawn_interval_ms: float = self.tuning.spawn_interval_ms
        self.last_spawn_ms: float = 0.0
        self.items: List[Item] = []

        self.effect_frenzy: bool = False
        self.effect_slow: bool = False
        self.effect_invincible: bool = False
        self.frenzy_until_ms: float = 0.0
        self.slow_until_ms: float = 0.0
        self.invincible_until_ms: float = 0.0

    # ── observers ─────────────────────────────────────────────────────────

    def subscribe(
        self,
        on_score_change: Optional[ScoreListener] = None,
        on_game_end: Optional[GameEndListener] = None,
    ) -> None:
        """Register listeners.  Either argument may be omitted."""
        if on_score_change is not None:
            self._score_listeners.append(on_score_change)
        if on_game_end is not None:
            self._end_listeners.append(on_game_end)

    def _notify_score(self) -> None:
        for listener in list(self._score_listeners):
            listener(self.score, self.level, self.time_remaining)

    def _notify_game_end(self) -> None:
        for listener in list(self._end_listeners):
            listener(self.score, self.level)

    # ── lifecycle ─────────────────────────────────────────────────────────

    @property
    def is_active(self) -> bool:
        """True while a round is in progress."""
        return self._active

    def start(self) -> None:
        """Begin a fresh round.  Does nothing if one is already running."""
        if self._active:
            return
        self._reset_state()
        self._active = True
        log.info(
            "Round started (tuning=%s, %ds)",
            self.tuning.name, self.time_remaining,
        )
        self._notify_score()

    def stop(self) -> None:
        """End the round and report the final score.

        Safe to call at any time; the game-end listeners fire only on the
        transition from active to inactive.  Items are left in place so a
        renderer can still draw the final frame.
        """
        if not self._active:
            return
        self._active = False
        log.info("Round over: score=%d level=%d", self.score, self.level)
        self._notify_game_end()

    # ── frame tick ────────────────────────────────────────────────────────

    def tick(self, delta_ms: float, now_ms: float) -> None:
        """Advance one rendered frame.

        Parameters
        ----------
        delta_ms : float
            Time since the previous frame.  Negative values count as zero.
        now_ms : float
            Current time, used for the spawn cadence and power-up expiry.
        """
        if not self._active:
            return
        if self.tuning.per_frame_expiry:
            self._expire_effects(now_ms)

        if now_ms - self.last_spawn_ms > self.effective_spawn_interval_ms:
            self.spawn_item()
            self.last_spawn_ms = now_ms

        self._update_items(delta_ms, now_ms)

    @property
    def effective_spawn_interval_ms(self) -> float:
        """Interval the spawn check uses right now (frenzy overrides it)."""
        if self.effect_frenzy:
            return self.tuning.frenzy_spawn_interval_ms
        return self.spawn_interval_ms

    def _update_items(self, delta_ms: float, now_ms: float) -> None:
        tuning = self.tuning
        time_scale = max(0.0, delta_ms) / tuning.frame_ms
        if self.effect_slow:
            time_scale *= tuning.slow_time_scale

        # Reverse order: popping index i never shifts the unvisited items,
        # and a bonus item appended during a catch is left for next frame.
        for i in range(len(self.items) - 1, -1, -1):
            item = self.items[i]
            item.fall(time_scale)

            if (item.lane == self.player_lane
                    and item.in_band(tuning.catch_band_min, tuning.catch_band_max)):
                self._resolve_catch(item, now_ms)
                self.items.pop(i)
                if not self._active:
                    return
                continue

            if item.y > tuning.floor_y:
                self.items.pop(i)

    # ── second tick ───────────────────────────────────────────────────────

    def tick_second(self, now_ms: Optional[float] = None) -> None:
        """Count the round clock down by one second.

        Levels up when the remaining time hits one of
        ``tuning.level_up_at`` exactly, notifies score listeners, ends the
        round at zero, then clears power-ups whose expiry has passed (also
        on the tick that ends the round).
        """
        if not self._active:
            return

        self.time_remaining -= 1
        if self.time_remaining in self.tuning.level_up_at:
            self._level_up()

        self._notify_score()

        if self.time_remaining <= 0:
            self.stop()

        self._expire_effects(self._clock() if now_ms is None else now_ms)

    def _level_up(self) -> None:
        tuning = self.tuning
        self.level += 1
        self.fall_speed = grow_speed(self.fall_speed, tuning)
        self.spawn_interval_ms = max(
            tuning.min_spawn_interval_ms,
            self.spawn_interval_ms - tuning.spawn_interval_step_ms,
        )
        log.info(
            "Level %d: fall_speed=%.3f spawn_interval=%.0fms",
            self.level, self.fall_speed, self.spawn_interval_ms,
        )

    def _expire_effects(self, now_ms: float) -> None:
        if self.effect_frenzy and now_ms >= self.frenzy_until_ms:
            self.effect_frenzy = False
            self.spawn_interval_ms = level_spawn_interval_ms(self.level, self.tuning)
            log.info("Frenzy over, spawn interval back to %.0fms", self.spawn_interval_ms)
        if self.effect_slow and now_ms >= self.slow_until_ms:
            self.effect_slow = False
            log.info("Slow motion over")
        if self.effect_invincible and now_ms >= self.invincible_until_ms:
            self.effect_invincible = False
            log.info("Shield over")

    # ── spawning ──────────────────────────────────────────────────────────

    def spawn_item(self) -> Item:
        """Create one random item at the spawn edge and add it to play."""
        tuning = self.tuning
        lane = self._rng.choice(LANES)
        kind = pick_kind(self._rng.random(), tuning.kind_table)

        speed = self.fall_speed
        if kind.is_special:
            speed *= tuning.special_speed_factor
        if tuning.fall_speed_jitter > 0.0:
            speed += self._rng.uniform(0.0, tuning.fall_speed_jitter)

        self._item_seq += 1
        item = Item(
            id=f"ITEM_{self._item_seq:04d}",
            lane=lane,
            y=tuning.spawn_y,
            kind=kind,
            points=self._points_for(kind),
            speed=speed,
        )
        self.items.append(item)
        log.debug("spawn %s %s lane=%d speed=%.3f", item.id, kind.value, lane, speed)
        return item

    def _points_for(self, kind: ItemKind) -> int:
        if kind is ItemKind.COMMON_FRUIT:
            return self.tuning.common_points
        if kind is ItemKind.RARE_FRUIT:
            return self.tuning.rare_points
        return 0

    # ── collisions ────────────────────────────────────────────────────────

    def _resolve_catch(self, item: Item, now_ms: float) -> None:
        tuning = self.tuning
        kind = item.kind
        log.debug("catch %s %s lane=%d y=%.1f", item.id, kind.value, item.lane, item.y)

        if kind is ItemKind.HAZARD:
            if self.effect_invincible:
                log.info("Shield absorbed %s", item.id)
                return
            log.info("Bomb caught in lane %s", lane_name(item.lane))
            self.time_remaining = 0
            self.stop()
        elif kind is ItemKind.FRENZY:
            self.effect_frenzy = True
            self.frenzy_until_ms = now_ms + tuning.frenzy_duration_ms
            log.info("Frenzy for %.0fms", tuning.frenzy_duration_ms)
            self.spawn_item()
        elif kind is ItemKind.SLOW:
            self.effect_slow = True
            self.slow_until_ms = now_ms + tuning.slow_duration_ms
            log.info("Slow motion for %.0fms", tuning.slow_duration_ms)
        elif kind is ItemKind.SHIELD:
            self.effect_invincible = True
            self.invincible_until_ms = now_ms + tuning.shield_duration_ms
            log.info("Shield for %.0fms", tuning.shield_duration_ms)
        elif kind.is_fruit:
            self.score += item.points
            self._notify_score()

    # ── input ─────────────────────────────────────────────────────────────

    def set_player_lane(self, label: str) -> int:
        """Move the basket according to a pose label.

        Unrecognised labels leave the lane where it is.  Returns the lane
        in effect after the call.
        """
        lane = lane_from_label(label)
        if lane is not None and lane != self.player_lane:
            log.debug("lane %d -> %d (%r)", self.player_lane, lane, label)
            self.player_lane = lane
        return self.player_lane

    # ── queries ───────────────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the round for renderers and the HTTP API."""
        return {
            "active": self._active,
            "score": self.score,
            "level": self.level,
            "time_remaining": self.time_remaining,
            "player_lane": self.player_lane,
            "lane_name": lane_name(self.player_lane),
            "fall_speed": round(self.fall_speed, 4),
            "spawn_interval_ms": self.effective_spawn_interval_ms,
            "effects": {
                "frenzy": self.effect_frenzy,
                "slow": self.effect_slow,
                "invincible": self.effect_invincible,
            },
            "items": [item.as_dict() for item in self.items],
        }
