"""
web/api.py
==========
FastAPI application exposing a :class:`~game.game_bridge.GameBridge` over
HTTP, so the pose pipeline and the renderer can run in other processes.

Start it through :mod:`main`::

    python main.py          # → http://127.0.0.1:8000/state

Endpoints
---------
* ``POST /game/start`` / ``POST /game/stop``: round control, return state.
* ``POST /game/tuning`` ``{"name": "arcade"}``: choose the next round's tuning
  and report its item mix.
* ``POST /lane`` ``{"label": "left"}``: raw lane label.
* ``POST /predictions`` ``[{"className": ..., "probability": ...}]``:
  classifier output, stabilized before it moves the basket.
* ``GET /state``: current snapshot.
* ``GET /events?topic=game.state``: drain queued bus events.
* ``GET /health``: liveness, bus counters and per-topic backlog.
"""

import logging
from typing import List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from game.game_bridge import TOPIC_OVER, TOPIC_STATE, GameBridge
from game.items import kind_probabilities

log = logging.getLogger("api")

_TOPICS = (TOPIC_STATE, TOPIC_OVER)

# ── Pydantic request schemas ─────────────────────────────────────────────────


class LaneRequest(BaseModel):
    """Free-form lane label, e.g. ``"Left"`` or ``"middle-stance"``."""
    label: str


class PredictionModel(BaseModel):
    """One class of a pose classifier frame."""
    className: str
    probability: float


class TuningRequest(BaseModel):
    """Name of a registered tuning (``sky`` or ``arcade``)."""
    name: str


# ── FastAPI application ──────────────────────────────────────────────────────


def create_app(bridge: GameBridge) -> FastAPI:
    """Build the API around *bridge*; the caller owns the bridge thread."""
    app = FastAPI(
        title="Fruit Catcher API",
        description="Round control, lane input and state for the fruit catcher.",
        version="1.0",
    )

    @app.post("/game/start")
    def start_game():
        """Start a round (no-op if one is running)."""
        return bridge.start_round()

    @app.post("/game/stop")
    def stop_game():
        """Stop the running round."""
        return bridge.stop_round()

    @app.post("/game/tuning")
    def set_tuning(request: TuningRequest):
        """Select the tuning used by the next round."""
        try:
            tuning = bridge.set_tuning(request.name)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return {
            "tuning": tuning.name,
            "kinds": {
                kind.value: round(p, 4)
                for kind, p in kind_probabilities(tuning.kind_table).items()
            },
        }

    @app.post("/lane")
    def set_lane(request: LaneRequest):
        """Move the basket by label; unknown labels keep the lane."""
        return {"lane": bridge.set_lane_label(request.label)}

    @app.post("/predictions")
    def push_predictions(predictions: List[PredictionModel]):
        """Feed one classifier frame through the stabilizer."""
        result, lane = bridge.push_predictions(
            [p.model_dump() for p in predictions]
        )
        return {
            "class_name": result.class_name,
            "probability": result.probability,
            "changed": result.changed,
            "lane": lane,
        }

    @app.get("/state")
    def get_state():
        """Current round snapshot."""
        return bridge.get_state()

    @app.get("/events")
    def get_events(topic: str = TOPIC_STATE):
        """Drain queued events for *topic*."""
        if topic not in _TOPICS:
            raise HTTPException(
                status_code=400,
                detail=f"unknown topic {topic!r}; expected one of {list(_TOPICS)}",
            )
        return bridge.poll_events(topic)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "bus": bridge.bus.metrics.report(),
            "pending": {topic: bridge.bus.pending(topic) for topic in _TOPICS},
        }

    log.info("API routes registered")
    return app
