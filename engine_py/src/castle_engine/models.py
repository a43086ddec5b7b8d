"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .constants import (
    DIRECTION_CLOCKWISE, LAYER_FACE_DOWN, LAYER_FACE_UP, LAYER_HAND,
    STATUS_WAITING, format_card, rank_value,
)


@dataclass(frozen=True)
class Card:
    suit: str
    rank: str
    id: str  # unique across every deck in the game

    @property
    def value(self) -> int:
        return rank_value(self.rank)

    def __str__(self) -> str:
        return format_card(self.rank, self.suit)


@dataclass
class Player:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    face_up: List[Card] = field(default_factory=list)
    face_down: List[Card] = field(default_factory=list)
    connected: bool = True
    ready: bool = False

    def layer(self, name: str) -> List[Card]:
        if name == LAYER_HAND:
            return self.hand
        if name == LAYER_FACE_UP:
            return self.face_up
        if name == LAYER_FACE_DOWN:
            return self.face_down
        raise ValueError(f"Unknown layer: {name}")

    def set_layer(self, name: str, cards: List[Card]):
        if name == LAYER_HAND:
            self.hand = cards
        elif name == LAYER_FACE_UP:
            self.face_up = cards
        elif name == LAYER_FACE_DOWN:
            self.face_down = cards
        else:
            raise ValueError(f"Unknown layer: {name}")

    def has_cleared_all_layers(self) -> bool:
        return not self.hand and not self.face_up and not self.face_down

    def card_count(self) -> int:
        return len(self.hand) + len(self.face_up) + len(self.face_down)


@dataclass
class GameState:
    players: List[Player] = field(default_factory=list)  # seating order is turn order
    draw_pile: List[Card] = field(default_factory=list)  # last element is the top
    discard_pile: List[Card] = field(default_factory=list)  # last element is the top
    current_turn_player: Optional[str] = None
    status: str = STATUS_WAITING  # waiting|setup|playing|finished
    direction: int = DIRECTION_CLOCKWISE
    last_play_was_seven: bool = False
    winner: Optional[str] = None
    version: int = 0
    burned_ids: List[str] = field(default_factory=list)  # cards taken out of the game by tens

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def seat_of(self, player_id: Optional[str]) -> int:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return -1

    def top_discard(self) -> Optional[Card]:
        return self.discard_pile[-1] if self.discard_pile else None

    @property
    def burned_count(self) -> int:
        return len(self.burned_ids)

    def increment_version(self):
        self.version += 1

    def iter_cards(self) -> Iterator[Card]:
        """Yield every card still in play, wherever it sits."""
        yield from self.draw_pile
        yield from self.discard_pile
        for player in self.players:
            yield from player.hand
            yield from player.face_up
            yield from player.face_down
