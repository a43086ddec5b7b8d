"""
Host session: runs a local engine for one participant and keeps it in step
with everyone else through a broadcast channel.

Only the participant whose action was accepted publishes; every participant
(including the publisher) adopts the published snapshot wholesale.
"""

import logging
import random
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple, Union

from ..engine import CastleEngine
from ..models import GameState
from ..rules import RuleConfig, default_rules
from ..serialization import sanitize_state
from .events import (
    ActionType, BaseAction, STATE_EVENT, create_state_event, parse_action,
)

logger = logging.getLogger(__name__)

Roster = Iterable[Tuple[str, str]]


class Broadcaster(Protocol):
    """Anything that can publish a named event to every participant."""

    def publish(self, name: str, data: Dict[str, Any]) -> None:
        ...


class LocalChannel:
    """In-process fan-out channel, used for tests and single-process tables."""

    def __init__(self):
        self.subscribers: Dict[str, List[Callable[[Dict[str, Any]], None]]] = defaultdict(list)
        self.published: List[Tuple[str, Dict[str, Any]]] = []

    def subscribe(self, name: str, callback: Callable[[Dict[str, Any]], None]):
        self.subscribers[name].append(callback)

    def unsubscribe(self, name: str, callback: Callable[[Dict[str, Any]], None]):
        if callback in self.subscribers[name]:
            self.subscribers[name].remove(callback)

    def publish(self, name: str, data: Dict[str, Any]):
        self.published.append((name, data))
        for callback in list(self.subscribers[name]):
            try:
                callback(data)
            except Exception as e:
                # A subscriber stays registered until it unsubscribes itself
                logger.error(f"Error delivering {name} to subscriber {callback!r}: {e}")


class GameSession:
    """One participant's view of a table."""

    def __init__(
        self,
        client_id: str,
        channel: Broadcaster,
        presence: Optional[Callable[[], Roster]] = None,
        rules: Optional[RuleConfig] = None,
        seed: Optional[int] = None
    ):
        self.client_id = client_id
        self.channel = channel
        self.presence = presence
        self.rules = rules or default_rules
        self.rng = random.Random(seed)
        self.engine = self._new_engine()
        self.on_state: Optional[Callable[[GameState], None]] = None
        self.on_view: Optional[Callable[[Dict[str, Any]], None]] = None

        subscribe = getattr(channel, "subscribe", None)
        if subscribe is not None:
            subscribe(STATE_EVENT, self.receive)

    def _new_engine(self) -> CastleEngine:
        return CastleEngine(rules=self.rules, seed=self.rng.getrandbits(64))

    @property
    def state(self) -> GameState:
        return self.engine.get_state()

    def publish_state(self):
        event = create_state_event(self.engine.snapshot())
        self.channel.publish(event["name"], event["data"])

    def start_from_roster(self, roster: Roster) -> bool:
        """Start a brand new game with the given (identity, name) pairs."""
        engine = self._new_engine()
        if not engine.seed_players(roster) or not engine.start_game():
            logger.info(f"{self.client_id} could not start a game: {engine.last_result.error_message}")
            return False
        self.engine = engine
        self.publish_state()
        return True

    def dispatch(self, action: Union[Dict[str, Any], BaseAction]) -> bool:
        """
        Apply this participant's action to the local engine.

        The new state is published only if the engine accepted the action.

        Raises:
            ValueError: If the action payload is malformed
        """
        if isinstance(action, dict):
            action = parse_action(action)

        if action.type == ActionType.START:
            if self.presence is None:
                logger.warning(f"{self.client_id} has no presence registry to start from")
                return False
            return self.start_from_roster(self.presence())

        engine = self.engine
        if action.type == ActionType.SWAP:
            applied = engine.swap_cards(self.client_id, action.hand_card_id, action.face_up_card_id)
        elif action.type == ActionType.READY:
            applied = engine.set_ready(self.client_id)
        elif action.type == ActionType.PLAY:
            applied = engine.play_cards(self.client_id, action.card_ids)
        elif action.type == ActionType.PICK_UP:
            applied = engine.pick_up_discard(self.client_id)
        elif action.type == ActionType.LEAVE:
            applied = engine.remove_player(self.client_id)
        else:
            raise ValueError(f"No handler for action type: {action.type}")

        if applied:
            self.publish_state()
        else:
            logger.debug(f"{self.client_id} {action.type.value} rejected: {engine.last_result.error_code}")
        return applied

    def view(self) -> Dict[str, Any]:
        """What this participant may see: their own hand, counts for everyone else's."""
        return sanitize_state(self.engine.state, self.client_id)

    def close(self):
        """Stop following the table."""
        unsubscribe = getattr(self.channel, "unsubscribe", None)
        if unsubscribe is not None:
            unsubscribe(STATE_EVENT, self.receive)

    def receive(self, snapshot: Union[Dict[str, Any], bytes, str]):
        """
        Adopt a broadcast snapshot, replacing the local engine outright.

        The snapshot is adopted before any rendering hook runs, so a failing
        hook never leaves this participant on an older state.

        Raises:
            SnapshotError: If the snapshot is malformed
        """
        self.engine = CastleEngine.from_snapshot(
            snapshot, rules=self.rules, seed=self.rng.getrandbits(64)
        )
        self._notify(self.on_state, self.engine.get_state())
        self._notify(self.on_view, self.view())

    def _notify(self, hook: Optional[Callable[[Any], None]], payload: Any):
        if hook is None:
            return
        try:
            hook(payload)
        except Exception:
            logger.exception(f"{self.client_id} rendering hook failed on version {self.engine.state.version}")
