"""
Trick play tests: follow suit, trick resolution and a full deal.
"""

import copy

import pytest

from bridge_engine.comparator import parse_card, trick_winner, trump_suit_for
from bridge_engine.constants import HEARTS, PHASE_FINISHED, PHASE_PLAYING, SEATS
from bridge_engine.engine import complete_trick, new_game, place_bid, play_card, start_game
from bridge_engine.errors import GameError
from bridge_engine.models import Play

from conftest import card, contract_bid


@pytest.fixture
def small_table(full_room):
    """Two cards each, 1h by west, north on lead."""
    game = full_room.game
    game.phase = PHASE_PLAYING
    game.hands = {
        "north": [card("2♠"), card("3♥")],
        "east": [card("A♠"), card("4♦")],
        "south": [card("K♥"), card("5♣")],
        "west": [card("5♠"), card("6♣")],
    }
    game.contract = contract_bid("west", "1h")
    game.declarer = "west"
    game.dummy = "east"
    game.turn = "north"
    return full_room


def legal_card(game, seat):
    hand = game.hands[seat]
    if game.current_trick:
        lead = game.current_trick[0].card.suit
        for c in hand:
            if c.suit == lead:
                return c
    return hand[0]


def test_trick_resolution_with_trump():
    """Only the trump wins, whatever the spades were."""
    trick = [
        Play(card("2♠"), "north"),
        Play(card("A♠"), "east"),
        Play(card("K♥"), "south"),
        Play(card("5♠"), "west"),
    ]
    assert trick_winner(trick, HEARTS).seat == "south"
    assert trick_winner(trick, None).seat == "east"


def test_off_suit_discard_never_wins():
    trick = [
        Play(card("2♣"), "north"),
        Play(card("A♦"), "east"),
        Play(card("3♣"), "south"),
        Play(card("K♠"), "west"),
    ]
    assert trick_winner(trick, HEARTS).seat == "south"


def test_higher_trump_overtrumps():
    trick = [
        Play(card("A♣"), "north"),
        Play(card("2♥"), "east"),
        Play(card("9♥"), "south"),
        Play(card("K♣"), "west"),
    ]
    assert trick_winner(trick, HEARTS).seat == "south"


def test_trump_suit_for_contract():
    assert trump_suit_for(contract_bid("north", "4h")) == "♥"
    assert trump_suit_for(contract_bid("north", "3nt")) is None
    assert trump_suit_for(None) is None


def test_parse_card():
    assert parse_card({"suit": "♠", "rank": "A"}) == card("A♠")
    assert parse_card({"suit": "h", "rank": "10"}) == card("10♥")
    with pytest.raises(GameError):
        parse_card({"suit": "♠", "rank": "1"})
    with pytest.raises(GameError):
        parse_card("A♠")


def test_follow_suit_enforced(small_table):
    play_card(small_table, "north", card("2♠"))
    before = copy.deepcopy(small_table)

    result = play_card(small_table, "east", card("4♦"))
    assert not result.success
    assert result.error_code == "MUST_FOLLOW_SUIT"
    assert "♠" in result.error_message
    assert small_table == before


def test_void_seat_may_play_any_suit(small_table):
    play_card(small_table, "north", card("2♠"))
    play_card(small_table, "east", card("A♠"))
    assert play_card(small_table, "south", card("K♥")).success


def test_card_not_in_hand(small_table):
    before = copy.deepcopy(small_table)
    result = play_card(small_table, "north", card("A♠"))
    assert result.error_code == "CARD_NOT_IN_HAND"
    assert small_table == before


def test_out_of_turn_play(small_table):
    before = copy.deepcopy(small_table)
    result = play_card(small_table, "east", card("A♠"))
    assert result.error_code == "NOT_YOUR_TURN"
    assert small_table == before


def test_fourth_card_waits_for_completion(small_table):
    for seat, text in zip(SEATS, ["2♠", "A♠", "K♥", "5♠"]):
        assert play_card(small_table, seat, card(text)).success

    game = small_table.game
    assert game.trick_pending
    assert game.turn is None
    assert len(game.current_trick) == 4
    assert game.trick_leader == "north"

    before = copy.deepcopy(small_table)
    for seat in SEATS:
        result = play_card(small_table, seat, game.hands[seat][0])
        assert result.error_code == "NOT_YOUR_TURN"
    assert small_table == before

    assert complete_trick(small_table).success
    assert game.trick_pending is False
    assert game.current_trick == []
    assert len(game.tricks) == 1
    assert game.turn == "south"
    assert game.trick_leader == "south"
    assert game.tricks_won == {"ns": 1, "ew": 0}


def test_complete_trick_without_pending_trick(small_table):
    before = copy.deepcopy(small_table)
    result = complete_trick(small_table)
    assert result.error_code == "WRONG_PHASE"
    assert small_table == before


def test_full_deal_plays_to_completion(full_room):
    """Thirteen tricks with card conservation checked after every play."""
    start_game(full_room, seed=2024)
    for token in ["1nt", "pass", "pass", "pass"]:
        assert place_bid(full_room, full_room.game.turn, token).success

    game = full_room.game
    assert game.phase == PHASE_PLAYING
    assert game.turn == "east"

    while game.phase == PHASE_PLAYING:
        if game.trick_pending:
            assert complete_trick(full_room).success
            continue
        seat = game.turn
        assert play_card(full_room, seat, legal_card(game, seat)).success
        in_hands = sum(len(game.hands[s]) for s in SEATS)
        assert in_hands + game.cards_in_play() == 52
        assert len(game.current_trick) <= 4

    assert game.phase == PHASE_FINISHED
    assert len(game.tricks) == 13
    assert all(len(trick) == 4 for trick in game.tricks)
    assert game.tricks_won["ns"] + game.tricks_won["ew"] == 13
    assert game.turn is None
    assert all(not game.hands[s] for s in SEATS)

    result = play_card(full_room, "north", card("A♠"))
    assert result.error_code == "WRONG_PHASE"


def test_new_game_after_finish(full_room):
    assert new_game(full_room).error_code == "WRONG_PHASE"

    full_room.game.phase = PHASE_FINISHED
    full_room.game.deal_number = 3
    assert new_game(full_room).success
    assert full_room.game.phase == "waiting"
    assert full_room.game.deal_number == 3
    assert len(full_room.players) == 4
