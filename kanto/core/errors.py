"""
Error classes for clearer exception sources.

IllegalActionError is raised before any state changes and carries a message
meant for the player. InvariantViolation signals a broken precondition (bad
ids, HP outside its range, malformed data) and is never caught by the engine.
"""
from __future__ import annotations

class KantoError(Exception):
    pass

class InvariantViolation(KantoError):
    pass

class DataLoadError(InvariantViolation):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load {path}: {detail}")
        self.path = path
        self.detail = detail

class ValidationError(KantoError):
    pass

class IllegalActionError(KantoError):
    def __init__(self, message: str, *, action: object = None):
        super().__init__(message)
        self.message = message
        self.action = action

__all__ = ["KantoError","InvariantViolation","DataLoadError","ValidationError","IllegalActionError"]
