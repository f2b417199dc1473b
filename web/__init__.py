"""
web: HTTP surface
==================

Modules
-------
api
    :func:`create_app` FastAPI application factory around a
    :class:`~game.game_bridge.GameBridge`.
"""
