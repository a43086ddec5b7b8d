"""
Action message models and validation.
"""

from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field, ValidationError

# Channel event name carrying full state snapshots
STATE_EVENT = "game-state"


class ActionType(str, Enum):
    """Inbound action types."""
    START = "start"
    SWAP = "swap"
    READY = "ready"
    PLAY = "play"
    PICK_UP = "pick_up"
    LEAVE = "leave"


class BaseAction(BaseModel):
    """Base action model."""
    type: ActionType


class StartAction(BaseAction):
    """Start the game with the players currently present."""
    type: ActionType = ActionType.START


class SwapAction(BaseAction):
    """Setup swap between a hand card and a face-up card."""
    type: ActionType = ActionType.SWAP
    hand_card_id: str = Field(..., min_length=1)
    face_up_card_id: str = Field(..., min_length=1)


class ReadyAction(BaseAction):
    """Lock in the face-up cards."""
    type: ActionType = ActionType.READY


class PlayAction(BaseAction):
    """Play cards event."""
    type: ActionType = ActionType.PLAY
    card_ids: List[str] = Field(..., min_length=1)


class PickUpAction(BaseAction):
    """Pick up the discard pile."""
    type: ActionType = ActionType.PICK_UP


class LeaveAction(BaseAction):
    """The player left the table."""
    type: ActionType = ActionType.LEAVE


# Union type for all inbound actions
InboundAction = Union[
    StartAction,
    SwapAction,
    ReadyAction,
    PlayAction,
    PickUpAction,
    LeaveAction
]

ACTION_MAP = {
    ActionType.START: StartAction,
    ActionType.SWAP: SwapAction,
    ActionType.READY: ReadyAction,
    ActionType.PLAY: PlayAction,
    ActionType.PICK_UP: PickUpAction,
    ActionType.LEAVE: LeaveAction,
}


def parse_action(data: Dict[str, Any]) -> InboundAction:
    """
    Parse raw action data into the matching action model.

    Args:
        data: Raw action data from the UI layer

    Returns:
        Parsed action model

    Raises:
        ValueError: If the action type is unknown or the data is malformed
    """
    action_type = data.get("type")

    if not action_type:
        raise ValueError("Missing action type")

    try:
        action_type = ActionType(action_type)
    except ValueError:
        raise ValueError(f"Invalid action type: {action_type}")

    try:
        return ACTION_MAP[action_type](**data)
    except ValidationError as e:
        raise ValueError(f"Invalid action data: {e}")


def create_state_event(state: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a state snapshot for publishing on the channel."""
    return {"name": STATE_EVENT, "data": state}
