"""
Auction tests: bid parsing, ordering and termination.
"""

import copy
import random

import pytest

from bridge_engine.bidding import is_bidding_complete, is_passed_out, parse_bid
from bridge_engine.constants import PHASE_BIDDING, PHASE_PLAYING
from bridge_engine.engine import place_bid, start_game
from bridge_engine.errors import GameError


@pytest.fixture
def auction(full_room):
    start_game(full_room, seed=5)
    return full_room


def bid_sequence(room, tokens):
    for token in tokens:
        result = place_bid(room, room.game.turn, token)
        assert result.success, result.error_message
    return room


def test_parse_bid():
    bid = parse_bid("north", "3NT")
    assert (bid.level, bid.strain, bid.ordinal) == (3, "nt", 20)
    assert parse_bid("east", "1c").ordinal == 6
    assert parse_bid("east", "1s").ordinal == 9
    assert parse_bid("east", "7nt").ordinal == 40

    for call in ("pass", "double", "redouble"):
        special = parse_bid("south", call)
        assert special.level == 0
        assert special.ordinal == 0
        assert not special.is_call


@pytest.mark.parametrize("token", ["0c", "8s", "1x", "", "x", "nt"])
def test_parse_bid_rejects_garbage(token):
    with pytest.raises(GameError) as exc:
        parse_bid("north", token)
    assert exc.value.code == "INVALID_BID"


def test_notrump_outranks_spades_at_same_level():
    assert parse_bid("n", "2nt").ordinal > parse_bid("n", "2s").ordinal
    assert parse_bid("n", "3c").ordinal > parse_bid("n", "2nt").ordinal


def test_auction_termination_example(auction):
    """1c by north then three passes: play starts with east."""
    bid_sequence(auction, ["1c", "pass", "pass", "pass"])
    game = auction.game
    assert game.phase == PHASE_PLAYING
    assert game.turn == "east"
    assert game.contract.token == "1c"
    assert game.declarer == "north"
    assert game.dummy == "south"


def test_bidding_continues_after_fewer_than_three_passes(auction):
    bid_sequence(auction, ["1h", "pass", "pass"])
    assert auction.game.phase == PHASE_BIDDING
    assert auction.game.turn == "west"


def test_later_bid_sets_declarer(auction):
    bid_sequence(auction, ["1c", "1h", "pass", "2h", "pass", "pass", "pass"])
    game = auction.game
    assert game.contract.token == "2h"
    assert game.declarer == "west"
    assert game.dummy == "east"
    assert game.turn == "north"


def test_bid_must_outrank_last_bid(auction):
    bid_sequence(auction, ["2d"])
    before = copy.deepcopy(auction)

    for token in ("2d", "2c", "1nt"):
        result = place_bid(auction, "east", token)
        assert not result.success
        assert result.error_code == "BID_TOO_LOW"
    assert auction == before

    assert place_bid(auction, "east", "2h").success


def test_accepted_bids_are_monotonic(full_room):
    """Random legal-looking sequences only ever accept rising ordinals."""
    rng = random.Random(11)
    tokens = [f"{level}{strain}" for level in range(1, 8) for strain in ("c", "d", "h", "s", "nt")]
    start_game(full_room, seed=8)
    for _ in range(60):
        if full_room.game.phase != PHASE_BIDDING:
            break
        token = rng.choice(tokens + ["pass"] * 10)
        place_bid(full_room, full_room.game.turn, token)

    real = [b.ordinal for b in full_room.game.bids if b.is_call]
    assert real == sorted(real)
    assert len(real) == len(set(real))


def test_out_of_turn_bid_is_rejected(auction):
    before = copy.deepcopy(auction)
    result = place_bid(auction, "south", "1c")
    assert not result.success
    assert result.error_code == "NOT_YOUR_TURN"
    assert auction == before


def test_bid_in_wrong_phase(full_room):
    result = place_bid(full_room, "north", "1c")
    assert result.error_code == "WRONG_PHASE"


def test_garbage_bid_leaves_state_untouched(auction):
    before = copy.deepcopy(auction)
    result = place_bid(auction, "north", "9z")
    assert result.error_code == "INVALID_BID"
    assert auction == before


def test_double_and_redouble_are_always_accepted(auction):
    bid_sequence(auction, ["double", "redouble", "1s", "double", "redouble"])
    game = auction.game
    assert game.contract.token == "1s"
    assert game.declarer == "south"
    assert game.phase == PHASE_BIDDING


def test_double_after_contract_does_not_change_contract(auction):
    bid_sequence(auction, ["1nt", "double", "pass", "pass", "pass"])
    game = auction.game
    assert game.phase == PHASE_PLAYING
    assert game.contract.token == "1nt"
    assert game.declarer == "north"
    assert game.turn == "east"


def test_passed_out_auction_redeals(auction):
    old_hands = copy.deepcopy(auction.game.hands)
    bid_sequence(auction, ["pass", "pass", "pass", "pass"])
    game = auction.game
    assert game.phase == PHASE_BIDDING
    assert game.bids == []
    assert game.turn == "north"
    assert game.deal_number == 2
    assert game.hands != old_hands


def test_termination_helpers():
    one_club = parse_bid("north", "1c")
    passes = [parse_bid(seat, "pass") for seat in ("east", "south", "west")]
    assert is_bidding_complete([one_club] + passes, one_club)
    assert not is_bidding_complete(passes, None)

    four_passes = [parse_bid(seat, "pass") for seat in ("north", "east", "south", "west")]
    assert is_passed_out(four_passes, None)
    assert not is_passed_out(four_passes, one_club)
