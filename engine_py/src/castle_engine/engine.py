"""Castle rules engine: dealing, setup swaps, play resolution and win detection"""

import copy
import logging
import random
from typing import Iterable, List, Optional, Tuple, Union

from .comparator import can_play_on, group_by_rank
from .constants import (
    DIRECTION_CLOCKWISE, ERROR_ALREADY_READY, ERROR_CARD_NOT_FOUND,
    ERROR_DUPLICATE_PLAYER, ERROR_NOT_ENOUGH_PLAYERS, ERROR_NOT_YOUR_TURN,
    ERROR_PLAYER_NOT_FOUND, ERROR_WRONG_PHASE, LAYER_FACE_DOWN, STATUS_PLAYING, STATUS_SETUP,
    STATUS_WAITING,
)
from .effects import advance_turn, apply_blind_penalty, apply_play, pick_up_pile
from .errors import raise_error
from .models import Card, GameState, Player
from .rules import RuleConfig, default_rules
from .serialization import dumps_state, loads_state, state_from_dict, state_to_dict
from .shuffle import build_deck, deal_castles, draw_cards, pick_starting_seat
from .validate import active_layer_name, validate_play

logger = logging.getLogger(__name__)


class ActionResult:
    """Outcome of a transition. On rejection ``state`` is the untouched input."""

    def __init__(
        self,
        success: bool,
        state: GameState,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None
    ):
        self.success = success
        self.state = state
        self.error_code = error_code
        self.error_message = error_message

    @classmethod
    def ok(cls, state: GameState) -> 'ActionResult':
        state.increment_version()
        return cls(True, state)

    @classmethod
    def rejected(cls, state: GameState, error_code: str, error_message: str) -> 'ActionResult':
        logger.debug(f"Rejected: [{error_code}] {error_message}")
        return cls(False, state, error_code, error_message)

    def raise_for_error(self) -> 'ActionResult':
        """Raise GameError for a rejected action, for hosts that prefer exceptions."""
        if not self.success:
            raise_error(self.error_code, self.error_message)
        return self

    def __bool__(self) -> bool:
        return self.success


def new_game() -> GameState:
    return GameState()


def add_player(state: GameState, player_id: str, name: str) -> ActionResult:
    if state.status != STATUS_WAITING:
        return ActionResult.rejected(state, ERROR_WRONG_PHASE, "Players can only join while waiting")
    if state.get_player(player_id):
        return ActionResult.rejected(state, ERROR_DUPLICATE_PLAYER, f"Player {player_id} already joined")

    new_state = copy.deepcopy(state)
    new_state.players.append(Player(id=player_id, name=name))
    return ActionResult.ok(new_state)


def seed_players(state: GameState, roster: Iterable[Tuple[str, str]]) -> ActionResult:
    """Add every (identity, display name) pair from the host's presence list."""
    if state.status != STATUS_WAITING:
        return ActionResult.rejected(state, ERROR_WRONG_PHASE, "Players can only join while waiting")

    new_state = copy.deepcopy(state)
    for player_id, name in roster:
        if not new_state.get_player(player_id):
            new_state.players.append(Player(id=player_id, name=name or player_id))
    return ActionResult.ok(new_state)


def remove_player(state: GameState, player_id: str) -> ActionResult:
    """
    Remove a player from the lobby, or mark them disconnected once dealt in.

    A seated player keeps their cards and their place in the turn order.
    """
    if not state.get_player(player_id):
        return ActionResult.rejected(state, ERROR_PLAYER_NOT_FOUND, "Player not found")

    new_state = copy.deepcopy(state)
    if new_state.status == STATUS_WAITING:
        new_state.players = [p for p in new_state.players if p.id != player_id]
    else:
        new_state.get_player(player_id).connected = False
    return ActionResult.ok(new_state)


def start_game(
    state: GameState,
    rules: Optional[RuleConfig] = None,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> ActionResult:
    """
    Shuffle, deal and move into the setup phase.

    Args:
        state: A waiting game state
        rules: Dealing rules, defaults to ``default_rules``
        seed: Seed for a repeatable deal (ignored when ``rng`` is given)
        rng: Random source for the shuffle, card ids and the starting seat
    """
    rules = rules or default_rules
    rng = rng or random.Random(seed)

    if state.status != STATUS_WAITING:
        return ActionResult.rejected(state, ERROR_WRONG_PHASE, f"Game already {state.status}")
    if not rules.can_start(len(state.players)):
        return ActionResult.rejected(
            state, ERROR_NOT_ENOUGH_PLAYERS,
            f"Need at least {rules.min_players} players"
        )

    new_state = copy.deepcopy(state)
    new_state.discard_pile = []
    new_state.winner = None
    new_state.direction = DIRECTION_CLOCKWISE
    new_state.last_play_was_seven = False
    new_state.burned_ids = []

    num_decks = rules.deck_count_for(len(new_state.players))
    new_state.draw_pile = build_deck(num_decks, rng)

    for player in new_state.players:
        player.ready = False
    deal_castles(new_state.draw_pile, new_state.players, rules)

    start_index = pick_starting_seat(len(new_state.players), rng)
    new_state.current_turn_player = new_state.players[start_index].id

    new_state.discard_pile.extend(draw_cards(new_state.draw_pile, 1))
    new_state.status = STATUS_SETUP

    logger.info(
        f"Game started with {len(new_state.players)} players and {num_decks} deck(s); "
        f"{new_state.current_turn_player} goes first"
    )
    return ActionResult.ok(new_state)


def swap_cards(state: GameState, player_id: str, hand_card_id: str, face_up_card_id: str) -> ActionResult:
    """Exchange a hand card with a face-up card before the player locks in."""
    if state.status != STATUS_SETUP:
        return ActionResult.rejected(state, ERROR_WRONG_PHASE, "Cards can only be swapped during setup")
    player = state.get_player(player_id)
    if not player:
        return ActionResult.rejected(state, ERROR_PLAYER_NOT_FOUND, "Player not found")
    if player.ready:
        return ActionResult.rejected(state, ERROR_ALREADY_READY, "Player is already locked in")

    hand_index = next((i for i, c in enumerate(player.hand) if c.id == hand_card_id), -1)
    face_up_index = next((i for i, c in enumerate(player.face_up) if c.id == face_up_card_id), -1)
    if hand_index == -1 or face_up_index == -1:
        return ActionResult.rejected(state, ERROR_CARD_NOT_FOUND, "Card not found")

    new_state = copy.deepcopy(state)
    player = new_state.get_player(player_id)
    player.hand[hand_index], player.face_up[face_up_index] = (
        player.face_up[face_up_index], player.hand[hand_index]
    )
    return ActionResult.ok(new_state)


def set_ready(state: GameState, player_id: str) -> ActionResult:
    """Lock a player in; the game starts once everyone is ready."""
    if state.status != STATUS_SETUP:
        return ActionResult.rejected(state, ERROR_WRONG_PHASE, "Players can only ready up during setup")
    player = state.get_player(player_id)
    if not player:
        return ActionResult.rejected(state, ERROR_PLAYER_NOT_FOUND, "Player not found")
    if player.ready:
        return ActionResult.rejected(state, ERROR_ALREADY_READY, "Player is already ready")

    new_state = copy.deepcopy(state)
    new_state.get_player(player_id).ready = True
    if all(p.ready for p in new_state.players):
        new_state.status = STATUS_PLAYING
        logger.info("All players ready, play begins")
    return ActionResult.ok(new_state)


def play_cards(
    state: GameState,
    player_id: str,
    card_ids: Iterable[str],
    rules: Optional[RuleConfig] = None
) -> ActionResult:
    """
    Play one or more same-rank cards from the player's active layer.

    A face-down card that can't legally be played is not a rejection: the
    player picks up the pile with it and the call still succeeds.
    """
    rules = rules or default_rules
    card_ids = list(card_ids)

    validation = validate_play(state, player_id, card_ids)
    if not validation.valid and not validation.blind_failure:
        return ActionResult.rejected(state, validation.error_code, validation.error_message)

    new_state = copy.deepcopy(state)
    player = new_state.get_player(player_id)
    played_ids = {card.id for card in validation.pattern['cards']}
    pattern = dict(validation.pattern)
    pattern['cards'] = [c for c in player.layer(pattern['source']) if c.id in played_ids]

    if validation.blind_failure:
        apply_blind_penalty(new_state, player, pattern['cards'])
        return ActionResult.ok(new_state)

    apply_play(new_state, player, pattern, rules)
    return ActionResult.ok(new_state)


def pick_up_discard(state: GameState, player_id: str) -> ActionResult:
    """Take the whole discard pile into hand and end the turn."""
    if state.status != STATUS_PLAYING:
        return ActionResult.rejected(state, ERROR_WRONG_PHASE, "Game is not in play phase")
    if state.current_turn_player != player_id:
        return ActionResult.rejected(state, ERROR_NOT_YOUR_TURN, "It's not your turn")
    if not state.get_player(player_id):
        return ActionResult.rejected(state, ERROR_PLAYER_NOT_FOUND, "Player not found")

    new_state = copy.deepcopy(state)
    picked = pick_up_pile(new_state, new_state.get_player(player_id))
    advance_turn(new_state)
    logger.debug(f"{player_id} picked up {picked} cards")
    return ActionResult.ok(new_state)


def top_discard(state: GameState) -> Optional[Card]:
    return state.top_discard()


def legal_plays(state: GameState, player_id: str) -> List[List[Card]]:
    """
    Card groups the player could play right now without penalty.

    Face-down cards are never listed: they are unseen, and any of them may be
    tried blind.
    """
    player = state.get_player(player_id)
    if state.status != STATUS_PLAYING or not player or state.current_turn_player != player_id:
        return []
    source = active_layer_name(player)
    if source == LAYER_FACE_DOWN:
        return []
    top = state.top_discard()
    return [
        cards for rank, cards in group_by_rank(player.layer(source)).items()
        if can_play_on(rank, top, state.last_play_was_seven)
    ]


class CastleEngine:
    """
    Owns one game state and applies transitions to it.

    Every operation returns True if it was applied and False if it was
    rejected, in which case nothing changed. The result of the most recent
    call is kept on ``last_result`` for hosts that want the error code.
    """

    def __init__(
        self,
        state: Optional[GameState] = None,
        rules: Optional[RuleConfig] = None,
        seed: Optional[int] = None
    ):
        self.state = state if state is not None else new_game()
        self.rules = rules or default_rules
        self.rng = random.Random(seed)
        self.last_result: Optional[ActionResult] = None

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Union[dict, bytes, str],
        rules: Optional[RuleConfig] = None,
        seed: Optional[int] = None
    ) -> 'CastleEngine':
        """Rehydrate from a broadcast snapshot, either a dict or JSON."""
        if isinstance(snapshot, dict):
            state = state_from_dict(snapshot)
        else:
            state = loads_state(snapshot)
        return cls(state, rules=rules, seed=seed)

    def get_state(self) -> GameState:
        return copy.deepcopy(self.state)

    def snapshot(self) -> dict:
        return state_to_dict(self.state)

    def to_json(self) -> bytes:
        return dumps_state(self.state)

    def _apply(self, result: ActionResult) -> bool:
        self.last_result = result
        if result.success:
            self.state = result.state
        return result.success

    def add_player(self, player_id: str, name: str) -> bool:
        return self._apply(add_player(self.state, player_id, name))

    def seed_players(self, roster: Iterable[Tuple[str, str]]) -> bool:
        return self._apply(seed_players(self.state, roster))

    def remove_player(self, player_id: str) -> bool:
        return self._apply(remove_player(self.state, player_id))

    def start_game(self) -> bool:
        return self._apply(start_game(self.state, self.rules, rng=self.rng))

    def swap_cards(self, player_id: str, hand_card_id: str, face_up_card_id: str) -> bool:
        return self._apply(swap_cards(self.state, player_id, hand_card_id, face_up_card_id))

    def set_ready(self, player_id: str) -> bool:
        return self._apply(set_ready(self.state, player_id))

    def play_cards(self, player_id: str, card_ids: Iterable[str]) -> bool:
        return self._apply(play_cards(self.state, player_id, card_ids, self.rules))

    def pick_up_discard(self, player_id: str) -> bool:
        return self._apply(pick_up_discard(self.state, player_id))

    def legal_plays(self, player_id: str) -> List[List[Card]]:
        return legal_plays(self.state, player_id)

    def top_discard(self) -> Optional[Card]:
        return self.state.top_discard()
