"""
Card shuffling and dealing utilities.
"""

import random
from typing import List, Optional

from .constants import RANKS, SUITS
from .models import Card, Player
from .rules import RuleConfig

_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def make_card_id(deck_index: int, suit: str, rank: str, rng: random.Random) -> str:
    """Card id with a short random token, e.g. ``1-hearts-Q-k3v9a``."""
    token = "".join(rng.choice(_ID_ALPHABET) for _ in range(5))
    return f"{deck_index}-{suit}-{rank}-{token}"


def shuffle_deck(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Fisher-Yates shuffle, in place.

    Args:
        deck: Cards to shuffle
        rng: Random source; pass a seeded ``random.Random`` for repeatable shuffles

    Returns:
        The same list, shuffled
    """
    rng = rng or random.Random()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def build_deck(num_decks: int = 1, rng: Optional[random.Random] = None) -> List[Card]:
    """
    Create ``num_decks`` standard 52-card decks and shuffle them together.

    Args:
        num_decks: Number of decks, a small positive integer
        rng: Random source for ids and the shuffle

    Returns:
        Shuffled list of cards, top of the pile last
    """
    rng = rng or random.Random()
    deck = []
    for deck_index in range(num_decks):
        for suit in SUITS:
            for rank in RANKS:
                deck.append(Card(suit=suit, rank=rank, id=make_card_id(deck_index, suit, rank, rng)))
    return shuffle_deck(deck, rng)


def draw_cards(pile: List[Card], count: int) -> List[Card]:
    """Pop up to ``count`` cards off the top of a pile."""
    drawn = []
    for _ in range(count):
        if not pile:
            break
        drawn.append(pile.pop())
    return drawn


def deal_castles(pile: List[Card], players: List[Player], rules: RuleConfig):
    """
    Deal every player their face-down, face-up and hand cards, in seat order.

    Each player receives all three layers before the next player is dealt.
    A pile that runs dry simply leaves later layers short.
    """
    for player in players:
        player.face_down = draw_cards(pile, rules.face_down_count)
        player.face_up = draw_cards(pile, rules.face_up_count)
        player.hand = draw_cards(pile, rules.hand_size)


def refill_hand(player: Player, pile: List[Card], hand_size: int) -> int:
    """Draw until the hand holds ``hand_size`` cards or the pile is empty."""
    drawn = 0
    while len(player.hand) < hand_size and pile:
        player.hand.append(pile.pop())
        drawn += 1
    return drawn


def pick_starting_seat(player_count: int, rng: Optional[random.Random] = None) -> int:
    rng = rng or random.Random()
    return rng.randrange(player_count)
