#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf: it never imports from
other project packages.  Gameplay constants live in
:class:`game.tuning.GameTuning`; only the *name* of the tuning is here.
"""

from typing import Optional

# ── Simulation defaults ──────────────────────────────────────────────────────
DEFAULT_TUNING: str = "sky"
DEFAULT_SEED: Optional[int] = None
TARGET_FPS: int = 60
SECOND_TICK_MS: float = 1000.0

# ── Pose label smoothing ─────────────────────────────────────────────────────
STABILIZER_THRESHOLD: float = 0.6
STABILIZER_WINDOW: int = 5

# ── Event bus defaults ───────────────────────────────────────────────────────
EVENT_QUEUE_SIZE: int = 256

# ── HTTP API ─────────────────────────────────────────────────────────────────
API_HOST: str = "127.0.0.1"
API_PORT: int = 8000

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_FILE: str = "catcher.log"
ENGINE_DEBUG_LOG: str = "engine_debug.log"
