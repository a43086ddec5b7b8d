# engine_py/src/castle_engine/errors.py

from typing import Optional


class GameError(Exception):
    """A rejected game action, raised only for hosts that ask for exceptions."""
    def __init__(self, code: Optional[str], message: Optional[str]):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class SnapshotError(ValueError):
    """A broadcast snapshot that cannot be turned back into a game state."""


def raise_error(code: Optional[str], message: Optional[str]):
    raise GameError(code, message)
