"""
Tests for card plays, special ranks, pickups and turn order.
"""

from castle_engine.constants import (
    DIRECTION_COUNTER_CLOCKWISE, ERROR_CARD_NOT_FOUND, ERROR_MIXED_RANKS,
    ERROR_NOT_YOUR_TURN, ERROR_RANK_TOO_LOW, ERROR_SEVEN_LIMIT, LAYER_FACE_DOWN,
    LAYER_FACE_UP, STATUS_FINISHED, STATUS_PLAYING,
)
from castle_engine.engine import (
    legal_plays, pick_up_discard, play_cards, remove_player, top_discard,
)
from castle_engine.serialization import dumps_state
from castle_engine.validate import active_layer_name, check_conservation


def test_play_out_of_turn_changes_nothing(card, playing_state, filler):
    five = card("5")
    state = playing_state(
        {"p1": {"hand": filler()}, "p2": {"hand": [five] + filler(tag="b")}},
        discard=[card("3")],
    )
    before = dumps_state(state)

    result = play_cards(state, "p2", [five.id])

    assert not result.success
    assert result.error_code == ERROR_NOT_YOUR_TURN
    assert result.state is state
    assert dumps_state(state) == before

    assert pick_up_discard(state, "p2").error_code == ERROR_NOT_YOUR_TURN
    assert dumps_state(state) == before


def test_play_onto_equal_or_higher(card, playing_state, filler, card_ids):
    nine = card("9", "clubs")
    state = playing_state(
        {"p1": {"hand": [nine], "face_down": filler()}, "p2": {"hand": filler(tag="b")}},
        discard=[card("9", "hearts", "top")],
    )

    result = play_cards(state, "p1", [nine.id])

    assert result.success
    assert card_ids(result.state.discard_pile) == ["9-hearts-top", nine.id]
    assert result.state.current_turn_player == "p2"
    assert result.state.version == state.version + 1


def test_play_below_top_is_rejected(card, playing_state, filler):
    five = card("5")
    state = playing_state(
        {"p1": {"hand": [five]}, "p2": {"hand": filler()}},
        discard=[card("K")],
    )
    result = play_cards(state, "p1", [five.id])
    assert result.error_code == ERROR_RANK_TOO_LOW
    assert result.state is state


def test_mixed_ranks_are_rejected(card, playing_state, filler):
    seven_c, seven_h, eight = card("7", "clubs"), card("7", "hearts"), card("8", "spades")
    state = playing_state(
        {"p1": {"hand": [seven_c, seven_h, eight] + filler()}, "p2": {"hand": filler(tag="b")}},
        discard=[card("3")],
    )

    result = play_cards(state, "p1", [seven_c.id, seven_h.id, eight.id])
    assert result.error_code == ERROR_MIXED_RANKS

    result = play_cards(state, "p1", [seven_c.id, seven_h.id])
    assert result.success
    assert result.state.last_play_was_seven
    assert result.state.top_discard() == seven_h
    assert eight in result.state.get_player("p1").hand


def test_seven_limits_next_play(card, playing_state, filler):
    low = {rank: card(rank, "clubs") for rank in ("6", "7", "8", "2", "10")}
    state = playing_state(
        {"p1": {"hand": list(low.values()) + filler()}, "p2": {"hand": filler(tag="b")}},
        discard=[card("7", "hearts", "top")],
        seven=True,
    )

    result = play_cards(state, "p1", [low["8"].id])
    assert result.error_code == ERROR_SEVEN_LIMIT

    for rank in ("6", "7", "2", "10"):
        assert play_cards(state, "p1", [low[rank].id]).success, rank


def test_seven_flag_clears_after_next_play(card, playing_state, filler):
    four = card("4")
    state = playing_state(
        {"p1": {"hand": [four] + filler()}, "p2": {"hand": filler(tag="b")}},
        discard=[card("7", "spades")],
        seven=True,
    )
    state = play_cards(state, "p1", [four.id]).state
    assert not state.last_play_was_seven


def test_ten_burns_the_pile(card, playing_state, filler, card_ids):
    ten = card("10")
    under = [card("5"), card("6"), card("A")]
    state = playing_state(
        {"p1": {"hand": [ten] + filler()}, "p2": {"hand": filler(tag="b")}},
        discard=under,
    )

    new_state = play_cards(state, "p1", [ten.id]).state

    assert new_state.discard_pile == []
    assert new_state.burned_count == 4
    assert new_state.burned_ids == card_ids(under + [ten])
    remaining = {c.id for c in new_state.iter_cards()}
    assert not remaining & {c.id for c in under + [ten]}
    assert new_state.current_turn_player == "p2"


def test_burned_cards_never_come_back(card, playing_state, filler):
    ten, five = card("10"), card("5")
    state = playing_state(
        {"p1": {"hand": [ten] + filler()}, "p2": {"hand": filler(tag="b")}},
        discard=[five],
    )
    dealt = [c.id for c in state.iter_cards()]

    burned = play_cards(state, "p1", [ten.id]).state
    assert check_conservation(burned, dealt)

    # A burned five back in a hand while a filler card vanishes keeps the totals equal
    burned.get_player("p2").hand[0] = five
    assert sum(1 for _ in burned.iter_cards()) + burned.burned_count == len(dealt)
    assert not check_conservation(burned, dealt)


def test_two_lets_the_player_go_again(card, playing_state, filler):
    two = card("2")
    state = playing_state(
        {"p1": {"hand": [two] + filler()}, "p2": {"hand": filler(tag="b")}},
        discard=[card("A")],
    )

    new_state = play_cards(state, "p1", [two.id]).state

    assert new_state.current_turn_player == "p1"
    assert new_state.top_discard() == two
    assert not new_state.last_play_was_seven


def test_failed_blind_play_picks_up(card, playing_state, filler):
    blind = card("4", "clubs")
    king = card("K")
    state = playing_state(
        {"p1": {"face_down": [blind, card("9", "clubs")]}, "p2": {"hand": filler()}},
        discard=[king],
    )

    result = play_cards(state, "p1", [blind.id])

    assert result.success
    p1 = result.state.get_player("p1")
    assert p1.hand == [king, blind]
    assert [c.id for c in p1.face_down] == ["9-clubs-a"]
    assert result.state.discard_pile == []
    assert result.state.current_turn_player == "p2"
    assert result.state.status == STATUS_PLAYING


def test_successful_blind_play(card, playing_state, filler):
    ace = card("A", "clubs")
    state = playing_state(
        {"p1": {"face_down": [ace, card("3", "clubs")]}, "p2": {"hand": filler()}},
        discard=[card("K")],
    )

    new_state = play_cards(state, "p1", [ace.id]).state

    assert new_state.top_discard() == ace
    assert new_state.get_player("p1").hand == []
    assert new_state.current_turn_player == "p2"


def test_last_card_wins(card, playing_state, filler):
    queen = card("Q")
    state = playing_state(
        {"p1": {"hand": [queen]}, "p2": {"hand": filler()}},
        discard=[card("5")],
    )

    new_state = play_cards(state, "p1", [queen.id]).state

    assert new_state.status == STATUS_FINISHED
    assert new_state.winner == "p1"
    assert new_state.current_turn_player == "p1"
    assert play_cards(new_state, "p1", [filler()[0].id]).success is False


def test_last_blind_card_wins(card, playing_state, filler):
    ace = card("A", "clubs")
    state = playing_state(
        {"p1": {"face_down": [ace]}, "p2": {"hand": filler()}},
        discard=[card("K")],
    )
    new_state = play_cards(state, "p1", [ace.id]).state
    assert new_state.winner == "p1"


def test_no_win_while_draw_pile_refills_hand(card, playing_state, filler):
    queen = card("Q")
    state = playing_state(
        {"p1": {"hand": [queen]}, "p2": {"hand": filler()}},
        draw=[card("3", "clubs")],
    )
    new_state = play_cards(state, "p1", [queen.id]).state
    assert new_state.winner is None
    assert [c.id for c in new_state.get_player("p1").hand] == ["3-clubs-a"]


def test_hand_refills_from_top_of_draw_pile(card, playing_state, filler, card_ids):
    five = card("5")
    keep = [card("9", "clubs", "k1"), card("9", "clubs", "k2")]
    draw = [card(rank, "diamonds") for rank in ("3", "4", "6", "8")]
    state = playing_state(
        {"p1": {"hand": [five] + keep}, "p2": {"hand": filler()}},
        draw=draw,
    )

    new_state = play_cards(state, "p1", [five.id]).state

    hand = card_ids(new_state.get_player("p1").hand)
    assert hand == card_ids(keep) + ["8-diamonds-a", "6-diamonds-a", "4-diamonds-a"]
    assert card_ids(new_state.draw_pile) == ["3-diamonds-a"]


def test_cards_from_lower_layers_are_rejected(card, playing_state, filler):
    five, face_up_nine = card("5"), card("9", "clubs")
    state = playing_state(
        {"p1": {"hand": [five], "face_up": [face_up_nine]}, "p2": {"hand": filler()}},
    )
    result = play_cards(state, "p1", [face_up_nine.id])
    assert result.error_code == ERROR_CARD_NOT_FOUND


def test_ids_outside_active_layer_are_ignored(card, playing_state, filler, card_ids):
    five, other_five = card("5"), card("5", "clubs")
    face_up_nine = card("9", "clubs")
    state = playing_state(
        {
            "p1": {"hand": [five, other_five, card("8")], "face_up": [face_up_nine]},
            "p2": {"hand": filler()},
        },
    )

    new_state = play_cards(state, "p1", [five.id, face_up_nine.id, "no-such-card"]).state

    assert card_ids(new_state.discard_pile) == [five.id]
    assert new_state.get_player("p1").face_up == [face_up_nine]


def test_face_up_plays_once_hand_is_empty(card, playing_state, filler):
    six, jack = card("6"), card("J")
    state = playing_state(
        {"p1": {"face_up": [six, jack], "face_down": filler()}, "p2": {"hand": filler(tag="b")}},
        discard=[card("4")],
    )
    new_state = play_cards(state, "p1", [six.id]).state
    assert new_state.get_player("p1").face_up == [jack]
    assert new_state.top_discard() == six


def test_pick_up_takes_whole_pile(card, playing_state, filler, card_ids):
    three = card("3")
    pile = [card("5"), card("7", "clubs")]
    state = playing_state(
        {"p1": {"hand": [three]}, "p2": {"hand": filler()}},
        discard=pile,
        seven=True,
    )

    new_state = pick_up_discard(state, "p1").state

    assert card_ids(new_state.get_player("p1").hand) == card_ids([three] + pile)
    assert new_state.discard_pile == []
    assert not new_state.last_play_was_seven
    assert new_state.current_turn_player == "p2"


def test_pick_up_empty_pile_passes_turn(card, playing_state, filler):
    three = card("3")
    state = playing_state({"p1": {"hand": [three]}, "p2": {"hand": filler()}})

    result = pick_up_discard(state, "p1")

    assert result.success
    assert result.state.get_player("p1").hand == [three]
    assert result.state.current_turn_player == "p2"


def test_turn_follows_direction(card, playing_state, filler):
    state = playing_state(
        {"p1": {"hand": filler(tag="a")}, "p2": {"hand": filler(tag="b")}, "p3": {"hand": filler(tag="c")}},
    )
    state.direction = DIRECTION_COUNTER_CLOCKWISE

    new_state = pick_up_discard(state, "p1").state
    assert new_state.current_turn_player == "p3"


def test_disconnected_players_keep_their_turn(card, playing_state, filler):
    state = playing_state(
        {"p1": {"hand": filler(tag="a")}, "p2": {"hand": filler(tag="b")}, "p3": {"hand": filler(tag="c")}},
    )
    state = remove_player(state, "p2").state

    state = pick_up_discard(state, "p1").state
    assert state.current_turn_player == "p2"


def test_legal_plays(card, playing_state, filler, card_ids):
    three, nine_a, nine_b, two = card("3"), card("9", "clubs"), card("9", "hearts"), card("2")
    state = playing_state(
        {"p1": {"hand": [nine_a, three, two, nine_b]}, "p2": {"hand": filler()}},
        discard=[card("8")],
    )

    plays = legal_plays(state, "p1")

    assert [card_ids(group) for group in plays] == [[two.id], [nine_a.id, nine_b.id]]
    assert legal_plays(state, "p2") == []


def test_no_legal_plays_listed_for_face_down(card, playing_state, filler):
    state = playing_state({"p1": {"face_down": [card("A")]}, "p2": {"hand": filler()}})
    assert legal_plays(state, "p1") == []


def test_play_hints(card, playing_state, filler):
    jack = card("J")
    state = playing_state(
        {"p1": {"face_up": [card("4")], "face_down": filler()}, "p2": {"face_down": filler(tag="b")}},
        discard=[card("3"), jack],
    )

    assert top_discard(state) == jack
    assert active_layer_name(state.get_player("p1")) == LAYER_FACE_UP
    assert active_layer_name(state.get_player("p2")) == LAYER_FACE_DOWN
    assert top_discard(pick_up_discard(state, "p1").state) is None
