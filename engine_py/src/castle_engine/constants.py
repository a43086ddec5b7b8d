"""Game constants and utilities"""

from typing import Dict, Tuple

SUITS: Tuple[str, ...] = ('hearts', 'diamonds', 'clubs', 'spades')
RANKS: Tuple[str, ...] = ('2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A')

RANK_VALUES: Dict[str, int] = {
    '2': 2, '3': 3, '4': 4, '5': 5, '6': 6, '7': 7, '8': 8, '9': 9, '10': 10,
    'J': 11, 'Q': 12, 'K': 13, 'A': 14,
}

SUIT_SYMBOLS = {'hearts': '♥', 'diamonds': '♦', 'clubs': '♣', 'spades': '♠'}

CARDS_PER_DECK = len(SUITS) * len(RANKS)

# Special ranks
RANK_TWO = '2'
RANK_SEVEN = '7'
RANK_TEN = '10'
WILD_RANKS = frozenset({RANK_TWO, RANK_SEVEN, RANK_TEN})
SEVEN_LIMIT = RANK_VALUES[RANK_SEVEN]

# Game statuses, in the only order they may be visited
STATUS_WAITING = 'waiting'
STATUS_SETUP = 'setup'
STATUS_PLAYING = 'playing'
STATUS_FINISHED = 'finished'
STATUS_ORDER = (STATUS_WAITING, STATUS_SETUP, STATUS_PLAYING, STATUS_FINISHED)

# Player layers, in play priority order
LAYER_HAND = 'hand'
LAYER_FACE_UP = 'face_up'
LAYER_FACE_DOWN = 'face_down'
LAYER_ORDER = (LAYER_HAND, LAYER_FACE_UP, LAYER_FACE_DOWN)

DIRECTION_CLOCKWISE = 1
DIRECTION_COUNTER_CLOCKWISE = -1

# Error codes
ERROR_WRONG_PHASE = "WRONG_PHASE"
ERROR_NOT_YOUR_TURN = "NOT_YOUR_TURN"
ERROR_PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
ERROR_DUPLICATE_PLAYER = "DUPLICATE_PLAYER"
ERROR_NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
ERROR_CARD_NOT_FOUND = "CARD_NOT_FOUND"
ERROR_MIXED_RANKS = "MIXED_RANKS"
ERROR_RANK_TOO_LOW = "RANK_TOO_LOW"
ERROR_SEVEN_LIMIT = "SEVEN_LIMIT"
ERROR_ALREADY_READY = "ALREADY_READY"


def rank_value(rank: str) -> int:
    try:
        return RANK_VALUES[rank]
    except KeyError:
        raise ValueError(f"Invalid rank: {rank}")


def format_card(rank: str, suit: str) -> str:
    return f"{rank}{SUIT_SYMBOLS.get(suit, '')}"
