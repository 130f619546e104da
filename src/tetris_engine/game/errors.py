from __future__ import annotations


class PreconditionError(ValueError):
    """Raised when the engine is misused (bad dimensions, unknown kind, ...).

    Rejected moves never raise; they return the unchanged state.
    """
