"""
game: Simulation core
======================

Modules
-------
engine
    :class:`GameSimulation` round state machine (frame + second ticks).
tuning
    :class:`GameTuning` frozen gameplay constants and named tunings.
items
    :class:`Item` entity, :class:`ItemKind` and kind distributions.
lanes
    Lane constants and pose-label classification.
game_bridge
    :class:`GameBridge` background-thread driver.
"""
