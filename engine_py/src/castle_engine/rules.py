"""
Game rule configuration and validation.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator


class RuleConfig(BaseModel):
    """Configuration for dealing and table size."""

    hand_size: int = Field(
        default=5,
        ge=1,
        le=13,
        description="Cards dealt to the hand and the size a hand is refilled to"
    )
    face_up_count: int = Field(
        default=3,
        ge=1,
        le=6,
        description="Cards dealt face up to each player"
    )
    face_down_count: int = Field(
        default=3,
        ge=1,
        le=6,
        description="Cards dealt face down to each player"
    )
    min_players: int = Field(
        default=2,
        ge=2,
        description="Minimum number of players required to start"
    )
    multi_deck_min_players: int = Field(
        default=3,
        ge=2,
        description="Player count from which more than one deck is used"
    )
    multi_deck_count: int = Field(
        default=2,
        ge=1,
        le=4,
        description="Number of decks used for larger tables"
    )

    @field_validator('multi_deck_min_players')
    @classmethod
    def validate_multi_deck_min_players(cls, v, info):
        """Multi-deck threshold can't be below the table minimum."""
        min_players = info.data.get('min_players', 2)
        if v < min_players:
            raise ValueError(
                f'multi_deck_min_players ({v}) must be >= min_players ({min_players})'
            )
        return v

    def can_start(self, player_count: int) -> bool:
        return player_count >= self.min_players

    def deck_count_for(self, player_count: int) -> int:
        """Number of decks to build for a table of this size."""
        if player_count >= self.multi_deck_min_players:
            return self.multi_deck_count
        return 1

    def cards_dealt_per_player(self) -> int:
        return self.face_down_count + self.face_up_count + self.hand_size


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)


def rules_from_env(prefix: str = "CASTLE_", environ: Optional[Mapping[str, str]] = None) -> RuleConfig:
    """Build a RuleConfig from environment variables such as CASTLE_HAND_SIZE."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for name in RuleConfig.model_fields:
        raw = environ.get(f"{prefix}{name.upper()}")
        if raw is not None and raw != "":
            overrides[name] = raw
    return create_rules(**overrides)
