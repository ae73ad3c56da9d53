"""
Contract result at the end of a deal.
"""

from dataclasses import dataclass
from typing import Optional

from .constants import BOOK, EW, NS, partnership_of
from .models import GameState


@dataclass
class ContractResult:
    declaring_side: Optional[str]
    tricks_needed: Optional[int]
    tricks_made: int
    made: Optional[bool]
    overtricks: int = 0
    undertricks: int = 0
    winner: Optional[str] = None  # partnership, None on a tie
    summary: str = ""

    def to_dict(self) -> dict:
        return {
            "declaringSide": self.declaring_side,
            "tricksNeeded": self.tricks_needed,
            "tricksMade": self.tricks_made,
            "made": self.made,
            "overtricks": self.overtricks,
            "undertricks": self.undertricks,
            "winner": self.winner,
            "summary": self.summary,
        }


def contract_result(game: GameState) -> ContractResult:
    """
    Decide make/down for the declaring side.

    Without a contract the side that won more tricks wins, or it is a tie.
    """
    ns, ew = game.tricks_won[NS], game.tricks_won[EW]

    if game.contract is None:
        if ns == ew:
            return ContractResult(None, None, 0, None, winner=None, summary="Tie")
        winner = NS if ns > ew else EW
        return ContractResult(
            None, None, max(ns, ew), None,
            winner=winner,
            summary=f"{winner.upper()} won more tricks",
        )

    side = partnership_of(game.contract.seat)
    other = EW if side == NS else NS
    needed = BOOK + game.contract.level
    made = game.tricks_won[side]
    label = f"{game.contract.token} by {game.contract.seat}"

    if made >= needed:
        overtricks = made - needed
        return ContractResult(
            side, needed, made, True,
            overtricks=overtricks,
            winner=side,
            summary=f"Contract made! {label}, {overtricks} overtricks",
        )

    down = needed - made
    return ContractResult(
        side, needed, made, False,
        undertricks=down,
        winner=other,
        summary=f"Contract failed. {label} down {down}",
    )
