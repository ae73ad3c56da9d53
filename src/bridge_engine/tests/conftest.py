"""
Shared fixtures for the bridge engine tests.
"""

import pytest

from bridge_engine.engine import create_room, join_room
from bridge_engine.models import Bid, Card, RoomState


NAMES = ["Alice", "Bob", "Carol", "Dave"]


def seat_four(room: RoomState) -> RoomState:
    for i, name in enumerate(NAMES):
        result = join_room(room, f"p{i}", name)
        assert result.success
    return room


def card(text: str) -> Card:
    """'A♠' / '10♥' shorthand."""
    return Card(suit=text[-1], rank=text[:-1])


def contract_bid(seat: str, token: str) -> Bid:
    from bridge_engine.bidding import parse_bid
    return parse_bid(seat, token)


@pytest.fixture
def room() -> RoomState:
    return create_room("TEST01")


@pytest.fixture
def full_room(room) -> RoomState:
    return seat_four(room)
