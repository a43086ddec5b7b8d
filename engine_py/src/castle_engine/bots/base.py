"""
Base bot interface and utilities.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..constants import STATUS_PLAYING, STATUS_SETUP
from ..models import GameState, Player

ACTION_PLAY = 'play'
ACTION_PICK_UP = 'pick_up'
ACTION_SWAP = 'swap'
ACTION_READY = 'ready'


class BotAction:
    """Represents a bot action."""

    def __init__(self, action_type: str, **kwargs):
        self.type = action_type
        self.data = kwargs

    def __repr__(self) -> str:
        return f"BotAction({self.type!r}, {self.data!r})"

    @classmethod
    def play(cls, card_ids: List[str]) -> 'BotAction':
        """Create a play action."""
        return cls(ACTION_PLAY, card_ids=list(card_ids))

    @classmethod
    def pick_up(cls) -> 'BotAction':
        """Create a pick-up action."""
        return cls(ACTION_PICK_UP)

    @classmethod
    def swap(cls, hand_card_id: str, face_up_card_id: str) -> 'BotAction':
        """Create a setup swap action."""
        return cls(ACTION_SWAP, hand_card_id=hand_card_id, face_up_card_id=face_up_card_id)

    @classmethod
    def ready(cls) -> 'BotAction':
        """Create a ready action."""
        return cls(ACTION_READY)


class BaseBot(ABC):
    """Abstract base class for bot players."""

    def __init__(self, player_id: str):
        self.player_id = player_id

    @abstractmethod
    def choose_action(self, state: GameState) -> Optional[BotAction]:
        """
        Choose an action based on the current game state.

        Args:
            state: Current game state

        Returns:
            BotAction to take, or None if no action needed
        """
        pass

    def get_player(self, state: GameState) -> Optional[Player]:
        return state.get_player(self.player_id)

    def is_my_turn(self, state: GameState) -> bool:
        """Check if it's this bot's turn."""
        return state.status == STATUS_PLAYING and state.current_turn_player == self.player_id

    def needs_setup(self, state: GameState) -> bool:
        """Check if this bot still has to finish the setup phase."""
        player = self.get_player(state)
        return state.status == STATUS_SETUP and player is not None and not player.ready


def apply_bot_action(engine, bot: BaseBot, action: BotAction) -> bool:
    """
    Apply a bot's chosen action to a CastleEngine.

    Returns:
        Whether the engine accepted the action
    """
    if action.type == ACTION_PLAY:
        return engine.play_cards(bot.player_id, action.data['card_ids'])
    if action.type == ACTION_PICK_UP:
        return engine.pick_up_discard(bot.player_id)
    if action.type == ACTION_SWAP:
        return engine.swap_cards(
            bot.player_id, action.data['hand_card_id'], action.data['face_up_card_id']
        )
    if action.type == ACTION_READY:
        return engine.set_ready(bot.player_id)
    raise ValueError(f"Unknown bot action: {action.type}")
