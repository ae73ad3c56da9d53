"""
Auction helpers: bid parsing and termination checks.
"""

from typing import List, Optional

from .constants import CALL_PASS, SPECIAL_CALLS, STRAIN_NOTRUMP, STRAIN_RANKS
from .errors import INVALID_BID, raise_error
from .models import Bid

NOTRUMP_TOKENS = ('nt', 'n', 'notrump')


def parse_bid(seat: str, token: str) -> Bid:
    """
    Parse a bid token such as '1c', '3nt', 'pass' or 'double'.

    Raises:
        GameError: If the token is not a call or a level 1-7 bid in a known strain
    """
    if not isinstance(token, str):
        raise_error(INVALID_BID, "Bid must be a string")

    normalized = token.strip().lower()
    if normalized in SPECIAL_CALLS:
        return Bid(seat=seat, token=normalized, level=0, strain=normalized, ordinal=0)

    if len(normalized) < 2 or not normalized[0].isdigit():
        raise_error(INVALID_BID, f"Invalid bid: {token}")

    level = int(normalized[0])
    strain = normalized[1:]
    if strain in NOTRUMP_TOKENS:
        strain = STRAIN_NOTRUMP

    if not 1 <= level <= 7:
        raise_error(INVALID_BID, f"Bid level must be between 1 and 7: {token}")
    if strain not in STRAIN_RANKS:
        raise_error(INVALID_BID, f"Unknown strain in bid: {token}")

    return Bid(
        seat=seat,
        token=f"{level}{strain}",
        level=level,
        strain=strain,
        ordinal=level * 5 + STRAIN_RANKS[strain],
    )


def last_contract_bid(bids: List[Bid]) -> Optional[Bid]:
    """Most recent bid that is not pass, double or redouble."""
    for bid in reversed(bids):
        if bid.is_call:
            return bid
    return None


def is_bidding_complete(bids: List[Bid], contract: Optional[Bid]) -> bool:
    """Auction ends after a contract followed by three passes."""
    if len(bids) < 4 or contract is None:
        return False
    return all(bid.strain == CALL_PASS for bid in bids[-3:])


def is_passed_out(bids: List[Bid], contract: Optional[Bid]) -> bool:
    """Four passes with no contract ever named."""
    if contract is not None or len(bids) < 4:
        return False
    return all(bid.strain == CALL_PASS for bid in bids[-4:])
