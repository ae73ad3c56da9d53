"""
Card parsing and trick winner resolution.
"""

from typing import List, Optional

from .constants import RANK_VALUES, SUIT_ALIASES, SUITS, STRAIN_TRUMPS
from .errors import INVALID_CARD, raise_error
from .models import Bid, Card, Play


def parse_card(data) -> Card:
    """
    Build a Card from client data: {"suit": "♠", "rank": "A"}.

    Suit letters (S/H/D/C) are accepted as well as symbols.
    """
    if not isinstance(data, dict):
        raise_error(INVALID_CARD, "Card must be an object with suit and rank")

    suit = str(data.get("suit", "")).strip()
    rank = str(data.get("rank", "")).strip().upper()
    suit = SUIT_ALIASES.get(suit.upper(), suit)

    if suit not in SUITS:
        raise_error(INVALID_CARD, f"Unknown suit: {data.get('suit')}")
    if rank not in RANK_VALUES:
        raise_error(INVALID_CARD, f"Unknown rank: {data.get('rank')}")
    return Card(suit=suit, rank=rank)


def trump_suit_for(contract: Optional[Bid]) -> Optional[str]:
    """Trump suit of the contract, None for notrump or no contract."""
    if contract is None:
        return None
    return STRAIN_TRUMPS.get(contract.strain)


def beats(challenger: Card, winner: Card, lead_suit: str, trump: Optional[str]) -> bool:
    """Whether challenger takes the trick away from the current winner."""
    if trump is not None:
        if challenger.suit == trump and winner.suit != trump:
            return True
        if challenger.suit == trump and winner.suit == trump:
            return challenger.value > winner.value
        if winner.suit == trump:
            return False
    if challenger.suit == lead_suit and winner.suit == lead_suit:
        return challenger.value > winner.value
    return False


def trick_winner(trick: List[Play], trump: Optional[str] = None) -> Play:
    """
    Resolve the winning play of a complete trick.

    Args:
        trick: Plays in the order they were made
        trump: Trump suit, or None at notrump

    Returns:
        The winning Play
    """
    if not trick:
        raise ValueError("Cannot resolve an empty trick")

    lead_suit = trick[0].card.suit
    winner = trick[0]
    for play in trick[1:]:
        if beats(play.card, winner.card, lead_suit, trump):
            winner = play
    return winner
