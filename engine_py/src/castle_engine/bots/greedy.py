"""
Greedy bot implementation with basic heuristics.
"""

from typing import List, Optional

from .base import BaseBot, BotAction
from ..comparator import is_wild
from ..constants import LAYER_FACE_DOWN, RANK_TEN, RANK_TWO
from ..engine import legal_plays
from ..models import Card, GameState
from ..validate import active_layer_name

# How much a card is worth keeping for later; specials rank above aces
KEEP_SCORES = {RANK_TWO: 15, RANK_TEN: 16}


def keep_score(card: Card) -> int:
    return KEEP_SCORES.get(card.rank, card.value)


class GreedyBot(BaseBot):
    """
    Greedy bot that sheds low cards and saves its specials.

    Strategy:
    - During setup, put the strongest cards face up and keep the weak ones in hand
    - Play every copy of the lowest legal non-special rank
    - Fall back to a seven, then a two, then a ten
    - Blind-play the first face-down card when nothing else is left
    - Pick up the pile when there is no legal play
    """

    def choose_action(self, state: GameState) -> Optional[BotAction]:
        """Choose the best action for the current state."""
        if self.needs_setup(state):
            return self._choose_setup_action(state)

        if self.is_my_turn(state):
            return self._choose_play_action(state)

        return None

    def _choose_setup_action(self, state: GameState) -> BotAction:
        """Swap while a hand card beats a face-up card, then ready up."""
        player = self.get_player(state)
        if player.hand and player.face_up:
            best_hand = max(player.hand, key=keep_score)
            worst_face_up = min(player.face_up, key=keep_score)
            if keep_score(best_hand) > keep_score(worst_face_up):
                return BotAction.swap(best_hand.id, worst_face_up.id)
        return BotAction.ready()

    def _choose_play_action(self, state: GameState) -> BotAction:
        """Choose whether to play cards or pick up."""
        player = self.get_player(state)
        if active_layer_name(player) == LAYER_FACE_DOWN:
            return BotAction.play([player.face_down[0].id])

        options = legal_plays(state, self.player_id)
        if not options:
            return BotAction.pick_up()

        best = min(options, key=self._score_play)
        return BotAction.play([card.id for card in best])

    def _score_play(self, cards: List[Card]) -> tuple:
        """Lower is better: ordinary ranks first, low before high."""
        rank = cards[0].rank
        return (is_wild(rank), keep_score(cards[0]) if is_wild(rank) else cards[0].value)
