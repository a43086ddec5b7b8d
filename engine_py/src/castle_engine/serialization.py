"""
State serialization and sanitization utilities.

``state_to_dict``/``state_from_dict`` are the lossless snapshot used to
rehydrate every participant's engine. ``sanitize_state`` is a per-viewer
display view and is not meant to be loaded back.
"""

from typing import Any, Dict, List, Optional, Union

import orjson

from .constants import RANKS, STATUS_FINISHED, STATUS_ORDER, SUITS
from .errors import SnapshotError
from .models import Card, GameState, Player


def card_to_dict(card: Card) -> Dict[str, Any]:
    return {"suit": card.suit, "rank": card.rank, "value": card.value, "id": card.id}


def card_from_dict(data: Dict[str, Any]) -> Card:
    try:
        suit, rank, card_id = data["suit"], str(data["rank"]), data["id"]
    except (KeyError, TypeError):
        raise SnapshotError(f"Malformed card: {data!r}")
    if suit not in SUITS or rank not in RANKS:
        raise SnapshotError(f"Unknown card {rank} of {suit}")
    return Card(suit=suit, rank=rank, id=card_id)


def _cards_to_list(cards: List[Card]) -> List[Dict[str, Any]]:
    return [card_to_dict(card) for card in cards]


def _cards_from_list(items: List[Dict[str, Any]]) -> List[Card]:
    return [card_from_dict(item) for item in items]


def player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "hand": _cards_to_list(player.hand),
        "face_up": _cards_to_list(player.face_up),
        "face_down": _cards_to_list(player.face_down),
        "connected": player.connected,
        "ready": player.ready,
    }


def player_from_dict(data: Dict[str, Any]) -> Player:
    try:
        return Player(
            id=data["id"],
            name=data["name"],
            hand=_cards_from_list(data.get("hand", [])),
            face_up=_cards_from_list(data.get("face_up", [])),
            face_down=_cards_from_list(data.get("face_down", [])),
            connected=bool(data.get("connected", True)),
            ready=bool(data.get("ready", False)),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise SnapshotError(f"Malformed player {e}")


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """Full snapshot of the state, suitable for broadcasting to every participant."""
    return {
        "players": [player_to_dict(p) for p in state.players],
        "draw_pile": _cards_to_list(state.draw_pile),
        "discard_pile": _cards_to_list(state.discard_pile),
        "current_turn_player": state.current_turn_player,
        "status": state.status,
        "direction": state.direction,
        "last_play_was_seven": state.last_play_was_seven,
        "winner": state.winner,
        "version": state.version,
        "burned_ids": list(state.burned_ids),
    }


def state_from_dict(data: Dict[str, Any]) -> GameState:
    """
    Rebuild a state from a snapshot.

    Raises:
        SnapshotError: if the snapshot is malformed
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a mapping")

    status = data.get("status", STATUS_ORDER[0])
    if status not in STATUS_ORDER:
        raise SnapshotError(f"Unknown status: {status}")
    direction = data.get("direction", 1)
    if isinstance(direction, bool) or direction not in (1, -1):
        raise SnapshotError(f"Invalid direction: {direction}")

    state = GameState(
        players=[player_from_dict(p) for p in data.get("players", [])],
        draw_pile=_cards_from_list(data.get("draw_pile", [])),
        discard_pile=_cards_from_list(data.get("discard_pile", [])),
        current_turn_player=data.get("current_turn_player"),
        status=status,
        direction=direction,
        last_play_was_seven=bool(data.get("last_play_was_seven", False)),
        winner=data.get("winner"),
        version=int(data.get("version", 0)),
        burned_ids=[str(card_id) for card_id in data.get("burned_ids", [])],
    )

    if state.current_turn_player is not None and not state.get_player(state.current_turn_player):
        raise SnapshotError(f"Turn belongs to unknown player {state.current_turn_player}")
    if state.winner is not None:
        if state.status != STATUS_FINISHED:
            raise SnapshotError(f"Winner {state.winner} set while the game is {state.status}")
        if not state.get_player(state.winner):
            raise SnapshotError(f"Winner {state.winner} is not seated")
    return state


def dumps_state(state: GameState) -> bytes:
    return orjson.dumps(state_to_dict(state))


def loads_state(payload: Union[bytes, str]) -> GameState:
    try:
        data = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}")
    return state_from_dict(data)


def sanitize_state(state: GameState, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Display view of the state for one viewer.

    Args:
        state: Game state to sanitize
        viewer_id: ID of the player viewing the state (to show their hand)

    Returns:
        Dictionary with other players' hands and all face-down cards reduced to counts
    """
    top = state.top_discard()
    sanitized = {
        "status": state.status,
        "version": state.version,
        "current_turn_player": state.current_turn_player,
        "is_my_turn": viewer_id is not None and state.current_turn_player == viewer_id,
        "direction": state.direction,
        "last_play_was_seven": state.last_play_was_seven,
        "winner": state.winner,
        "draw_pile_count": len(state.draw_pile),
        "discard_pile_count": len(state.discard_pile),
        "top_discard": card_to_dict(top) if top else None,
        "players": [],
    }

    for player in state.players:
        sanitized_player = {
            "id": player.id,
            "name": player.name,
            "connected": player.connected,
            "ready": player.ready,
            "hand_count": len(player.hand),
            "face_up": _cards_to_list(player.face_up),
            "face_down_count": len(player.face_down),
        }

        # Show full hand only to the viewer
        if player.id == viewer_id:
            sanitized_player["hand"] = _cards_to_list(player.hand)

        sanitized["players"].append(sanitized_player)

    return sanitized
