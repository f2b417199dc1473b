"""
pose/stabilizer.py
==================
Smooths the per-frame class probabilities coming out of a pose classifier
into a stable lane label.

The classifier emits, several times a second, a list such as::

    [{"className": "Left", "probability": 0.81},
     {"className": "Center", "probability": 0.12},
     {"className": "Right", "probability": 0.07}]

:class:`PredictionStabilizer` keeps the last ``smoothing_frames`` frames,
averages each class's probability over that window and only switches the
reported label when a class's mean reaches ``threshold``.  Until the window
is full, or while no class is confident enough, the previously confirmed
label is held (``None`` before the first confirmation).
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Mapping, Optional, Sequence

import numpy as np

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StabilizedPrediction:
    """Output of one :meth:`PredictionStabilizer.stabilize` call."""
    class_name: Optional[str]
    probability: float
    changed: bool = False


class PredictionStabilizer:
    """Windowed-mean filter over classifier outputs.

    Parameters
    ----------
    threshold : float
        Minimum windowed mean probability, in ``(0, 1]``, for a class to
        become the reported label.
    smoothing_frames : int
        Number of most recent frames averaged.
    """

    def __init__(self, threshold: float = 0.6, smoothing_frames: int = 5) -> None:
        if not 0.0 < threshold <= 1.0:
            raise ValueError(f"threshold must be in (0, 1], got {threshold}")
        if smoothing_frames < 1:
            raise ValueError(f"smoothing_frames must be >= 1, got {smoothing_frames}")
        self.threshold = float(threshold)
        self.smoothing_frames = int(smoothing_frames)
        self._window: Deque[Dict[str, float]] = deque(maxlen=self.smoothing_frames)
        self._classes: List[str] = []
        self._current: Optional[str] = None

    @property
    def current(self) -> Optional[str]:
        """Last confirmed class name, or *None*."""
        return self._current

    def reset(self) -> None:
        """Forget the window and the confirmed label."""
        self._window.clear()
        self._classes = []
        self._current = None

    def stabilize(self, predictions: Sequence[Mapping[str, Any]]) -> StabilizedPrediction:
        """Feed one frame of predictions and return the stabilized label."""
        self._window.append(self._parse_frame(predictions))
        self._classes = self._window_classes()

        if not self._classes:
            return StabilizedPrediction(self._current, 0.0)

        means = self._window_means()
        if len(self._window) < self.smoothing_frames:
            return StabilizedPrediction(self._current, self._mean_of(self._current, means))

        best = int(np.argmax(means))
        changed = False
        if means[best] >= self.threshold and self._classes[best] != self._current:
            log.debug(
                "label %r -> %r (mean %.2f)",
                self._current, self._classes[best], means[best],
            )
            self._current = self._classes[best]
            changed = True

        return StabilizedPrediction(
            self._current, self._mean_of(self._current, means), changed,
        )

    # ── helpers ───────────────────────────────────────────────────────────

    def _parse_frame(self, predictions: Sequence[Mapping[str, Any]]) -> Dict[str, float]:
        frame: Dict[str, float] = {}
        for entry in predictions or ():
            name = entry.get("className") or entry.get("class_name")
            if not name:
                continue
            name = str(name)
            try:
                prob = float(entry.get("probability", 0.0))
            except (TypeError, ValueError):
                continue
            frame[name] = float(np.clip(prob, 0.0, 1.0))
        return frame

    def _window_classes(self) -> List[str]:
        # Columns only for names still in the window, in first-seen order.
        return list(dict.fromkeys(name for frame in self._window for name in frame))

    def _window_means(self) -> np.ndarray:
        matrix = np.array(
            [[frame.get(name, 0.0) for name in self._classes] for frame in self._window],
            dtype=float,
        )
        return matrix.mean(axis=0)

    def _mean_of(self, name: Optional[str], means: np.ndarray) -> float:
        if name is None or name not in self._classes:
            return 0.0
        return float(means[self._classes.index(name)])
