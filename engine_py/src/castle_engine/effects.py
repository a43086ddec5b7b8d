"""
Special card effects and turn bookkeeping.

These functions mutate the working copy of the state handed to them by the
engine; the engine is responsible for copying before calling in.
"""

import logging
from typing import Dict, Iterable, List

from .constants import LAYER_FACE_DOWN, RANK_SEVEN, RANK_TEN, RANK_TWO, STATUS_FINISHED
from .models import Card, GameState, Player
from .rules import RuleConfig
from .shuffle import refill_hand

logger = logging.getLogger(__name__)


def advance_turn(state: GameState):
    """
    Hand the turn to the next seat in the current direction.

    Disconnected players keep their seat and are not skipped.
    """
    if not state.players:
        state.current_turn_player = None
        return
    index = state.seat_of(state.current_turn_player)
    next_index = (index + state.direction) % len(state.players)
    state.current_turn_player = state.players[next_index].id


def remove_cards(player: Player, source: str, cards: List[Card]):
    played_ids = {card.id for card in cards}
    player.set_layer(source, [c for c in player.layer(source) if c.id not in played_ids])


def apply_burn(state: GameState, played: List[Card]) -> int:
    """
    Ten: the discard pile and the tens themselves leave the game.

    Returns:
        Number of cards burned
    """
    burned_cards = state.discard_pile + list(played)
    burned = len(burned_cards)
    state.discard_pile = []
    state.burned_ids.extend(card.id for card in burned_cards)
    logger.debug(f"Burned {burned} cards")
    return burned


def pick_up_pile(state: GameState, player: Player, extra: Iterable[Card] = ()) -> int:
    """
    Move the whole discard pile (plus any ``extra`` cards) into the player's hand.

    Clears the seven constraint. Does not move the turn.
    """
    picked = list(state.discard_pile) + list(extra)
    player.hand.extend(picked)
    state.discard_pile = []
    state.last_play_was_seven = False
    return len(picked)


def apply_blind_penalty(state: GameState, player: Player, cards: List[Card]) -> int:
    """
    Failed blind play: reveal the face-down card(s), pick up the pile with them
    and pass the turn on.
    """
    remove_cards(player, LAYER_FACE_DOWN, cards)
    picked = pick_up_pile(state, player, cards)
    advance_turn(state)
    logger.debug(f"{player.name} failed a blind play and picked up {picked} cards")
    return picked


def check_winner(state: GameState, player: Player) -> bool:
    """Finish the game if the player has no cards left anywhere."""
    if not player.has_cleared_all_layers():
        return False
    state.winner = player.id
    state.status = STATUS_FINISHED
    logger.info(f"{player.name} ({player.id}) has won")
    return True


def apply_play(state: GameState, player: Player, pattern: Dict, rules: RuleConfig) -> bool:
    """
    Resolve a validated play.

    Args:
        state: Working copy of the game state
        player: The acting player (from ``state``)
        pattern: Validation pattern with ``rank``, ``cards`` and ``source``
        rules: Dealing rules, for the hand size to refill to

    Returns:
        True if the play won the game
    """
    rank = pattern['rank']
    cards = pattern['cards']

    remove_cards(player, pattern['source'], cards)

    if rank == RANK_TEN:
        apply_burn(state, cards)
    else:
        state.discard_pile.extend(cards)

    refill_hand(player, state.draw_pile, rules.hand_size)

    if check_winner(state, player):
        return True

    state.last_play_was_seven = rank == RANK_SEVEN

    # A two lets the same player go again
    if rank != RANK_TWO:
        advance_turn(state)
    return False
