"""Battle system: immutable snapshots, per-turn resolution and rendering.

Import concrete pieces from their modules (``kanto.battle.engine``,
``kanto.battle.models`` ...); this package keeps no re-exports.
"""
