"""
Computer players for the Castle engine.
"""

from .base import BaseBot, BotAction, apply_bot_action
from .greedy import GreedyBot

__all__ = ["BaseBot", "BotAction", "GreedyBot", "apply_bot_action"]
