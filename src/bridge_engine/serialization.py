"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, Optional

from .constants import PHASE_FINISHED, SEATS
from .models import RoomState
from .scoring import contract_result


def sanitize_state(room: RoomState, viewer_seat: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the game_state snapshot for one seat.

    Args:
        room: Room to serialize
        viewer_seat: Seat of the receiving player; only this hand is revealed

    Returns:
        Snapshot dictionary safe for JSON transmission
    """
    game = room.game

    sanitized = {
        "roomCode": room.code,
        "version": room.version,
        "phase": game.phase,
        "turn": game.turn,
        "position": viewer_seat,
        "hand": [],
        "handCounts": {seat: len(game.hands.get(seat, [])) for seat in SEATS},
        "bids": [bid.to_dict() for bid in game.bids],
        "contract": game.contract.to_dict() if game.contract else None,
        "declarer": game.declarer,
        "dummy": game.dummy,
        "tricks": [[play.to_dict() for play in trick] for trick in game.tricks],
        "currentTrick": [play.to_dict() for play in game.current_trick],
        "trickLeader": game.trick_leader,
        "tricksWon": dict(game.tricks_won),
        "playerNames": room.seat_names(),
        "dealNumber": game.deal_number,
        "result": None,
    }

    # Show full hand only to the viewer
    if viewer_seat in game.hands:
        sanitized["hand"] = [card.to_dict() for card in game.hands[viewer_seat]]

    if game.phase == PHASE_FINISHED:
        sanitized["result"] = contract_result(game).to_dict()

    return sanitized


def player_summary(room: RoomState) -> Dict[str, Any]:
    """Seat map and head count used by lobby messages."""
    return {
        "playersCount": len(room.players),
        "playerNames": room.seat_names(),
    }
