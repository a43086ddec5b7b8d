"""
Shared fixtures for the Castle engine tests.
"""

from typing import Dict, Iterable, List, Optional

import pytest

from castle_engine.constants import STATUS_PLAYING
from castle_engine.models import Card, GameState, Player


def make_card(rank: str, suit: str = "hearts", tag: str = "a") -> Card:
    return Card(suit=suit, rank=rank, id=f"{rank}-{suit}-{tag}")


def build_playing_state(
    layers: Dict[str, Dict[str, Iterable[Card]]],
    discard: Iterable[Card] = (),
    draw: Iterable[Card] = (),
    turn: str = "p1",
    seven: bool = False
) -> GameState:
    """A state already in play, with the given cards laid out by hand."""
    players: List[Player] = []
    for player_id, cards in layers.items():
        players.append(Player(
            id=player_id,
            name=player_id.upper(),
            hand=list(cards.get("hand", [])),
            face_up=list(cards.get("face_up", [])),
            face_down=list(cards.get("face_down", [])),
            ready=True,
        ))
    return GameState(
        players=players,
        draw_pile=list(draw),
        discard_pile=list(discard),
        current_turn_player=turn,
        status=STATUS_PLAYING,
        last_play_was_seven=seven,
    )


@pytest.fixture
def card():
    return make_card


@pytest.fixture
def playing_state():
    return build_playing_state


@pytest.fixture
def filler():
    """Cards to keep an opponent from accidentally winning."""
    def _filler(count: int = 3, tag: str = "fill") -> List[Card]:
        return [make_card("9", "spades", f"{tag}{i}") for i in range(count)]
    return _filler


def ids(cards: Optional[Iterable[Card]]) -> List[str]:
    return [c.id for c in cards or []]


@pytest.fixture
def card_ids():
    return ids
