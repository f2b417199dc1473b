#!/usr/bin/env python3
"""
Quick demo: plays one full round headless on a synthetic clock, with a
fake pose classifier steering the basket, so you can watch the engine
without a webcam or a renderer.

Usage:
    python3 demo.py [tuning]
"""

import logging
import random
import sys
from typing import Dict, List

from logging_setup import setup_logging
from game.game_bridge import TOPIC_OVER, TOPIC_STATE, GameBridge
from game.items import ItemKind
from game.lanes import LANE_NAMES
from game.tuning import get_tuning

log = logging.getLogger("demo")


class SyntheticClock:
    """Manually advanced millisecond clock shared by the bridge and the demo."""

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> float:
        self.now_ms += ms
        return self.now_ms


class DemoPoseFeed:
    """Fake classifier that "leans" toward the best lane, with noise.

    The target lane is the lane of the lowest wanted item above the basket
    that has no bomb between it and the basket; the classifier then
    reports that lane with a noisy confidence.
    """

    # Chance that a frame is pure noise (wrong class wins).
    _NOISE_RATE = 0.15

    def __init__(self, seed: int = 0):
        self._rng = random.Random(seed)

    def predictions(self, state: Dict) -> List[Dict]:
        target = self._target_lane(state)
        if self._rng.random() < self._NOISE_RATE:
            target = self._rng.randrange(len(LANE_NAMES))
        confident = self._rng.uniform(0.65, 0.95)
        rest = (1.0 - confident) / (len(LANE_NAMES) - 1)
        return [
            {
                "className": name.capitalize(),
                "probability": confident if lane == target else rest,
            }
            for lane, name in enumerate(LANE_NAMES)
        ]

    @staticmethod
    def _target_lane(state: Dict) -> int:
        items = [it for it in state["items"] if it["y"] < 95.0]
        bombs = {it["lane"] for it in items if it["kind"] == ItemKind.HAZARD.value and it["y"] > 60.0}
        if state["effects"]["invincible"]:
            bombs = set()
        wanted = [
            it for it in items
            if it["kind"] != ItemKind.HAZARD.value and it["lane"] not in bombs
        ]
        if wanted:
            return max(wanted, key=lambda it: it["y"])["lane"]
        lane = state["player_lane"]
        if lane in bombs:
            safe = [other for other in range(len(LANE_NAMES)) if other not in bombs]
            return safe[0] if safe else lane
        return lane


def run_demo(tuning_name: str = "sky", seed: int = 7, fps: int = 60) -> Dict:
    """Play one round to the end and return the final ``game.over`` payload."""
    clock = SyntheticClock()
    bridge = GameBridge(tuning=get_tuning(tuning_name), fps=fps, seed=seed, clock=clock)
    feed = DemoPoseFeed(seed=seed)
    finals: List = []
    bridge.bus.subscribe(TOPIC_OVER, finals.append)
    frame_ms = 1000.0 / fps

    bridge.start_round()
    frame = 0
    # Hard cap well past the round length in case a listener misbehaves.
    max_frames = fps * (bridge.engine.tuning.round_seconds + 5)
    while bridge.engine.is_active and frame < max_frames:
        bridge.step(clock.advance(frame_ms))
        if frame % 3 == 0:
            bridge.push_predictions(feed.predictions(bridge.get_state()))
        for event in bridge.poll_events(TOPIC_STATE):
            p = event["payload"]
            if p["time_remaining"] % 10 == 0:
                log.info("t=%2ds score=%d level=%d", p["time_remaining"], p["score"], p["level"])
        frame += 1

    result = finals[-1].payload if finals else bridge.get_state()
    log.info("Final: score=%s level=%s after %d frames", result["score"], result["level"], frame)
    return result


if __name__ == "__main__":
    setup_logging(logging.INFO)
    run_demo(sys.argv[1] if len(sys.argv) > 1 else "sky")
