"""
game/game_bridge.py
===================
Background-thread driver tying :mod:`game.engine`, the pose
:class:`~pose.stabilizer.PredictionStabilizer` and the
:class:`bus.event_bus.EventBus` together.

The engine has two cadences (per frame and per second) and is not
thread-safe; the bridge owns both cadences and serialises every engine
call behind one lock, so the HTTP API and other threads can push lane
input and read state at any time.

Public API consumed by :mod:`web.api` and :mod:`demo`
-----------------------------------------------------
* ``start_round()``           → ``dict`` snapshot
* ``stop_round()``            → ``dict`` snapshot
* ``set_lane_label(label)``   → ``int`` lane
* ``push_predictions(preds)`` → ``(StabilizedPrediction, int)``
* ``set_tuning(name)``        → ``GameTuning``
* ``get_state()``             → ``dict``
* ``poll_events(topic)``      → ``List[dict]``
* ``step(now_ms)``            → ``None`` (one frame, for synthetic clocks)
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from bus.event_bus import EventBus
from config import (
    EVENT_QUEUE_SIZE,
    SECOND_TICK_MS,
    STABILIZER_THRESHOLD,
    STABILIZER_WINDOW,
    TARGET_FPS,
)
from game.engine import GameSimulation, monotonic_ms
from game.tuning import GameTuning, get_tuning
from pose.stabilizer import PredictionStabilizer, StabilizedPrediction

log = logging.getLogger("game_bridge")

TOPIC_STATE = "game.state"
TOPIC_OVER = "game.over"
_SENDER = "bridge"


class GameBridge:
    """Simulation driver running in a background thread.

    The thread calls :meth:`step` at ``fps``; each step advances one frame
    and fires as many second ticks as the clock has crossed since the
    round started.  Score/time changes and game over are republished on
    the event bus as ``game.state`` and ``game.over``.

    Parameters
    ----------
    tuning : GameTuning or None
        Gameplay constants for the engine.
    fps : float
        Target frame rate of the background thread.
    seed : int or None
        Seed for reproducible spawns.
    bus : EventBus or None
        Event transport; a private one is created when *None*.
    stabilizer : PredictionStabilizer or None
        Pose label filter used by :meth:`push_predictions`.
    clock : callable or None
        Returns the current time in ms; monotonic time when *None*.
    second_ms : float
        Length of one round-clock second (shorten it to fast-forward).
    """

    def __init__(
        self,
        tuning: Optional[GameTuning] = None,
        fps: float = TARGET_FPS,
        seed: Optional[int] = None,
        bus: Optional[EventBus] = None,
        stabilizer: Optional[PredictionStabilizer] = None,
        clock: Optional[Callable[[], float]] = None,
        second_ms: float = SECOND_TICK_MS,
    ) -> None:
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        if second_ms <= 0:
            raise ValueError(f"second_ms must be positive, got {second_ms}")
        self._fps = float(fps)
        self._second_ms = float(second_ms)
        self._clock = clock or monotonic_ms
        self._bus = bus or EventBus(max_queue=EVENT_QUEUE_SIZE)
        self._stabilizer = stabilizer or PredictionStabilizer(
            threshold=STABILIZER_THRESHOLD, smoothing_frames=STABILIZER_WINDOW,
        )
        self._engine = GameSimulation(
            tuning=tuning,
            seed=seed,
            clock=self._clock,
            on_score_change=self._on_score_change,
            on_game_end=self._on_game_end,
        )

        self._lock = threading.Lock()
        self._snapshot: Dict[str, Any] = self._engine.snapshot()
        self._last_frame_ms: Optional[float] = None
        self._next_second_ms: float = 0.0
        self.rounds_played: int = 0

        self._thread: Optional[threading.Thread] = None
        self._running = False

    @property
    def engine(self) -> GameSimulation:
        return self._engine

    @property
    def bus(self) -> EventBus:
        return self._bus

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn the background frame thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="GameBridge"
        )
        self._thread.start()
        log.info("GameBridge started at %.1f fps", self._fps)

    def stop(self) -> None:
        """Signal the thread to stop and wait for it to join."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=2.0)
            self._thread = None
        log.info("GameBridge stopped")

    # ── Round control ─────────────────────────────────────────────────────────

    def start_round(self) -> Dict[str, Any]:
        """Start a round (no-op while one is running) and return the state."""
        with self._lock:
            if not self._engine.is_active:
                now = self._clock()
                self._stabilizer.reset()
                self._engine.start()
                self._last_frame_ms = now
                self._next_second_ms = now + self._second_ms
            self._refresh()
            return dict(self._snapshot)

    def stop_round(self) -> Dict[str, Any]:
        """End the current round, if any, and return the final state."""
        with self._lock:
            self._engine.stop()
            self._refresh()
            return dict(self._snapshot)

    def set_tuning(self, name: str) -> GameTuning:
        """Switch to a named tuning for the next round.

        Raises
        ------
        ValueError
            Unknown tuning name.
        RuntimeError
            A round is in progress.
        """
        tuning = get_tuning(name)
        with self._lock:
            if self._engine.is_active:
                raise RuntimeError("cannot change tuning during a round")
            self._engine.tuning = tuning
            log.info("Tuning set to %s", tuning.name)
            return tuning

    # ── Input ─────────────────────────────────────────────────────────────────

    def set_lane_label(self, label: str) -> int:
        """Forward a raw lane label to the engine; returns the lane."""
        with self._lock:
            lane = self._engine.set_player_lane(label)
            self._refresh()
            return lane

    def push_predictions(
        self,
        predictions: Sequence[Mapping[str, Any]],
    ) -> Tuple[StabilizedPrediction, int]:
        """Stabilize one frame of classifier output and steer the basket.

        Returns the stabilized prediction and the lane in effect afterwards.
        """
        with self._lock:
            result = self._stabilizer.stabilize(predictions)
            if result.class_name:
                lane = self._engine.set_player_lane(result.class_name)
            else:
                lane = self._engine.player_lane
            self._refresh()
            return result, lane

    # ── Queries ───────────────────────────────────────────────────────────────

    def get_state(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._snapshot)

    def poll_events(self, topic: str = TOPIC_STATE) -> List[Dict[str, Any]]:
        """Drain the bus queue for *topic* as plain dicts."""
        return [event.as_dict() for event in self._bus.poll(topic)]

    # ── Frame stepping ────────────────────────────────────────────────────────

    def step(self, now_ms: Optional[float] = None) -> None:
        """Advance one frame at *now_ms* (defaults to the clock)."""
        with self._lock:
            now = self._clock() if now_ms is None else now_ms
            self._step_locked(now)

    def _step_locked(self, now: float) -> None:
        engine = self._engine
        if not engine.is_active:
            self._last_frame_ms = now
            return

        last = self._last_frame_ms if self._last_frame_ms is not None else now
        self._last_frame_ms = now
        engine.tick(now - last, now)

        while engine.is_active and now >= self._next_second_ms:
            engine.tick_second(now)
            self._next_second_ms += self._second_ms

        self._refresh()

    def _refresh(self) -> None:
        self._snapshot = self._engine.snapshot()
        self._snapshot["rounds_played"] = self.rounds_played

    # ── Engine listeners (called with the lock held) ─────────────────────────

    def _on_score_change(self, score: int, level: int, time_remaining: int) -> None:
        self._bus.publish(
            topic=TOPIC_STATE,
            sender=_SENDER,
            payload={"score": score, "level": level, "time_remaining": time_remaining},
        )

    def _on_game_end(self, score: int, level: int) -> None:
        self.rounds_played += 1
        log.info("Round %d finished: score=%d level=%d", self.rounds_played, score, level)
        self._bus.publish(
            topic=TOPIC_OVER,
            sender=_SENDER,
            payload={"score": score, "level": level, "round": self.rounds_played},
        )

    # ── Background loop ───────────────────────────────────────────────────────

    def _loop(self) -> None:
        frame_s = 1.0 / self._fps
        while self._running:
            t0 = time.perf_counter()
            try:
                self.step()
            except Exception:
                log.exception("GameBridge frame error")
            time.sleep(max(0.0, frame_s - (time.perf_counter() - t0)))
