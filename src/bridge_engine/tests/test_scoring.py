"""
Contract result tests.
"""

from bridge_engine.constants import PHASE_FINISHED
from bridge_engine.models import GameState
from bridge_engine.scoring import contract_result
from bridge_engine.serialization import sanitize_state
from bridge_engine.engine import create_room

from conftest import contract_bid


def finished(contract, ns, ew):
    return GameState(
        phase=PHASE_FINISHED,
        contract=contract,
        declarer=contract.seat if contract else None,
        tricks_won={"ns": ns, "ew": ew},
    )


def test_contract_made_exactly():
    result = contract_result(finished(contract_bid("south", "4h"), 10, 3))
    assert result.made
    assert result.tricks_needed == 10
    assert result.overtricks == 0
    assert result.winner == "ns"
    assert "made" in result.summary.lower()


def test_contract_down_two():
    result = contract_result(finished(contract_bid("south", "4h"), 8, 5))
    assert result.made is False
    assert result.undertricks == 2
    assert result.winner == "ew"
    assert "down 2" in result.summary


def test_overtricks_for_defenders_contract():
    result = contract_result(finished(contract_bid("east", "1c"), 4, 9))
    assert result.declaring_side == "ew"
    assert result.made
    assert result.overtricks == 2


def test_no_contract_falls_back_to_trick_count():
    assert contract_result(finished(None, 8, 5)).winner == "ns"
    assert contract_result(finished(None, 3, 10)).winner == "ew"
    tie = contract_result(finished(None, 0, 0))
    assert tie.winner is None
    assert tie.summary == "Tie"


def test_result_included_in_finished_snapshot():
    room = create_room("SCORE1")
    room.game = finished(contract_bid("north", "3nt"), 9, 4)
    snapshot = sanitize_state(room, "north")
    assert snapshot["result"]["made"] is True
    assert snapshot["result"]["tricksNeeded"] == 9
