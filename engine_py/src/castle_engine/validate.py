"""
Play validation for card plays.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from .comparator import rank_rejection
from .constants import (
    ERROR_CARD_NOT_FOUND, ERROR_MIXED_RANKS, ERROR_NOT_YOUR_TURN,
    ERROR_PLAYER_NOT_FOUND, ERROR_WRONG_PHASE, LAYER_FACE_DOWN, LAYER_ORDER,
    STATUS_PLAYING,
)
from .models import Card, GameState, Player


class ValidationResult:
    """Result of play validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        pattern: Optional[Dict] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.pattern = pattern

    @classmethod
    def success(cls, pattern: Dict) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, pattern=pattern)

    @classmethod
    def error(cls, error_code: str, error_message: str, pattern: Optional[Dict] = None) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message, pattern=pattern)

    @property
    def blind_failure(self) -> bool:
        """A face-down card that turned out not to be playable."""
        return (
            not self.valid
            and self.pattern is not None
            and self.pattern['source'] == LAYER_FACE_DOWN
        )


def active_layer_name(player: Player) -> str:
    """The first non-empty layer: hand, then face up, then face down."""
    for name in LAYER_ORDER[:-1]:
        if player.layer(name):
            return name
    return LAYER_FACE_DOWN


def select_cards(player: Player, card_ids: Iterable[str]) -> Tuple[str, List[Card]]:
    """
    Look up the nominated cards in the player's active layer only.

    Ids that are not in the active layer are ignored.

    Returns:
        Tuple of (layer name, matching cards in layer order)
    """
    wanted = set(card_ids)
    source = active_layer_name(player)
    return source, [card for card in player.layer(source) if card.id in wanted]


def detect_rank(cards: List[Card]) -> Optional[str]:
    """Shared rank of the cards, or None when empty or mixed."""
    if not cards:
        return None
    rank = cards[0].rank
    if any(card.rank != rank for card in cards):
        return None
    return rank


def validate_play(state: GameState, player_id: str, card_ids: Iterable[str]) -> ValidationResult:
    """
    Validate a card play attempt.

    A result that is not valid but carries a face-down pattern is a failed blind
    play; the caller applies the pickup penalty instead of rejecting.

    Args:
        state: Current game state
        player_id: ID of player attempting the play
        card_ids: IDs of the cards being played

    Returns:
        ValidationResult with validation outcome
    """
    if state.status != STATUS_PLAYING:
        return ValidationResult.error(
            ERROR_WRONG_PHASE,
            f"Game is not in play phase (current: {state.status})"
        )

    if state.current_turn_player != player_id:
        return ValidationResult.error(
            ERROR_NOT_YOUR_TURN,
            f"It's not your turn (current turn: {state.current_turn_player})"
        )

    player = state.get_player(player_id)
    if not player:
        return ValidationResult.error(ERROR_PLAYER_NOT_FOUND, "Player not found")

    source, cards = select_cards(player, card_ids)
    if not cards:
        return ValidationResult.error(
            ERROR_CARD_NOT_FOUND,
            f"None of the cards are in the player's {source} cards"
        )

    rank = detect_rank(cards)
    if rank is None:
        return ValidationResult.error(ERROR_MIXED_RANKS, "All cards played together must share one rank")

    pattern = {'rank': rank, 'cards': cards, 'source': source}
    rejection = rank_rejection(rank, state.top_discard(), state.last_play_was_seven)
    if rejection:
        top = state.top_discard()
        if state.last_play_was_seven:
            message = f"Must play 7 or lower after a seven (played {rank})"
        else:
            message = f"Must play {top.rank} or higher (played {rank})"
        return ValidationResult.error(rejection, message, pattern)

    return ValidationResult.success(pattern)


def card_census(state: GameState) -> Counter:
    """Count every card id still in play."""
    return Counter(card.id for card in state.iter_cards())


def check_conservation(state: GameState, dealt_ids: Iterable[str]) -> bool:
    """
    Check that no card has been duplicated or lost since the deal.

    Every dealt id must sit in exactly one place: in play or burned.
    """
    dealt = Counter(dealt_ids)
    census = card_census(state)
    census.update(state.burned_ids)
    return census == dealt
