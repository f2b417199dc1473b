#!/usr/bin/env python3
"""
main.py
=======
Runs the real-time game bridge and serves the HTTP API.

Environment overrides
---------------------
``CATCHER_TUNING``     tuning name (``sky`` / ``arcade``)
``CATCHER_FPS``        frame rate of the bridge thread
``CATCHER_SEED``       random seed
``CATCHER_HOST``       API bind address
``CATCHER_PORT``       API port
``CATCHER_LOG_LEVEL``  logging level name (``DEBUG``, ``INFO``, ...)
``CATCHER_ENGINE_DEBUG`` set to ``1`` to write ``engine_debug.log``
"""

import logging
import os
import sys

import uvicorn

import config
from logging_setup import setup_logging
from game.game_bridge import GameBridge
from game.tuning import get_tuning
from web.api import create_app


def _env_int(name: str, default):
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def main() -> int:
    level_name = os.environ.get("CATCHER_LOG_LEVEL", "INFO").upper()
    setup_logging(
        getattr(logging, level_name, logging.INFO),
        engine_debug=os.environ.get("CATCHER_ENGINE_DEBUG") == "1",
    )
    log = logging.getLogger("main")

    try:
        tuning = get_tuning(os.environ.get("CATCHER_TUNING", config.DEFAULT_TUNING))
        fps = _env_int("CATCHER_FPS", config.TARGET_FPS)
        seed = _env_int("CATCHER_SEED", config.DEFAULT_SEED)
        port = _env_int("CATCHER_PORT", config.API_PORT)
        bridge = GameBridge(tuning=tuning, fps=fps, seed=seed)
    except ValueError as exc:
        log.error("Invalid configuration: %s", exc)
        return 2
    host = os.environ.get("CATCHER_HOST", config.API_HOST)

    bridge.start()
    try:
        log.info("Serving on http://%s:%d (tuning=%s)", host, port, tuning.name)
        uvicorn.run(create_app(bridge), host=host, port=port)
    except KeyboardInterrupt:
        log.info("Shutting down...")
    finally:
        bridge.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
