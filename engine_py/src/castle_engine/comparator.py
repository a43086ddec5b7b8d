"""
Rank comparison against the discard pile.
"""

from collections import OrderedDict
from typing import Dict, List, Optional

from .constants import (
    ERROR_RANK_TOO_LOW, ERROR_SEVEN_LIMIT, SEVEN_LIMIT, WILD_RANKS, rank_value,
)
from .models import Card


def is_wild(rank: str) -> bool:
    """2, 7 and 10 go on anything."""
    return rank in WILD_RANKS


def rank_rejection(rank: str, top_card: Optional[Card], seven_active: bool) -> Optional[str]:
    """
    Check a rank against the current pile.

    Args:
        rank: Rank being played
        top_card: Top of the discard pile, None when the pile is empty
        seven_active: Whether the previous play was a seven

    Returns:
        None if the rank may be played, otherwise the error code explaining why not
    """
    if is_wild(rank):
        return None
    if top_card is None:
        return None
    value = rank_value(rank)
    if seven_active:
        # Inclusive: a seven may be followed by another seven-valued card
        return None if value <= SEVEN_LIMIT else ERROR_SEVEN_LIMIT
    return None if value >= top_card.value else ERROR_RANK_TOO_LOW


def can_play_on(rank: str, top_card: Optional[Card], seven_active: bool = False) -> bool:
    return rank_rejection(rank, top_card, seven_active) is None


def sort_cards(cards: List[Card], reverse: bool = False) -> List[Card]:
    """Sort cards by play value, ties broken by id so the order is stable."""
    return sorted(cards, key=lambda c: (c.value, c.id), reverse=reverse)


def group_by_rank(cards: List[Card]) -> Dict[str, List[Card]]:
    """Group cards by rank, lowest rank first."""
    groups: Dict[str, List[Card]] = OrderedDict()
    for card in sort_cards(cards):
        groups.setdefault(card.rank, []).append(card)
    return groups
