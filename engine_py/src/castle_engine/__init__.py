"""
Rules engine for Castle, a shedding card game played from hand, face-up and
face-down cards.
"""

from .engine import (
    ActionResult, CastleEngine, add_player, legal_plays, new_game, pick_up_discard,
    play_cards, remove_player, seed_players, set_ready, start_game, swap_cards,
)
from .models import Card, GameState, Player
from .rules import RuleConfig, create_rules, default_rules

__version__ = "0.1.0"

__all__ = [
    "ActionResult",
    "CastleEngine",
    "Card",
    "GameState",
    "Player",
    "RuleConfig",
    "add_player",
    "create_rules",
    "default_rules",
    "legal_plays",
    "new_game",
    "pick_up_discard",
    "play_cards",
    "remove_player",
    "seed_players",
    "set_ready",
    "start_game",
    "swap_cards",
]
