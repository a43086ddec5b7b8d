"""
Host-side glue: action messages and a session that keeps a local engine in
step with the broadcast channel.
"""

from .events import *
from .session import Broadcaster, GameSession, LocalChannel

__all__ = [
    "ActionType",
    "Broadcaster",
    "GameSession",
    "LocalChannel",
    "STATE_EVENT",
    "create_state_event",
    "parse_action",
]
