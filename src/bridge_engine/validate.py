"""
Validation of bids, card plays and lobby input.
"""

from typing import Optional

from .bidding import last_contract_bid
from .constants import PHASE_BIDDING, PHASE_PLAYING
from .errors import (
    BID_TOO_LOW, CARD_NOT_IN_HAND, CHAT_NOT_ALLOWED, INVALID_CHAT, INVALID_NAME,
    MUST_FOLLOW_SUIT, NOT_YOUR_TURN, WRONG_PHASE
)
from .models import Bid, Card, GameState
from .rules import RuleConfig, default_rules


class ValidationResult:
    """Result of a validation step."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message

    @classmethod
    def success(cls) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)


def validate_turn(game: GameState, phase: str, seat: str) -> ValidationResult:
    """Phase and turn checks shared by bids and card plays."""
    if game.phase != phase:
        action = "Bidding is not open" if phase == PHASE_BIDDING else "Cards cannot be played now"
        return ValidationResult.error(
            WRONG_PHASE,
            f"{action} (current phase: {game.phase})"
        )

    if game.trick_pending or seat != game.turn:
        return ValidationResult.error(NOT_YOUR_TURN, "It is not your turn")

    return ValidationResult.success()


def validate_bid(game: GameState, bid: Bid) -> ValidationResult:
    """
    Validate a parsed bid against the auction.

    Pass is always legal. Double and redouble are accepted without checking
    whether they are currently available. A real bid must outrank the last
    real bid in the auction.
    """
    check = validate_turn(game, PHASE_BIDDING, bid.seat)
    if not check.valid:
        return check

    if not bid.is_call:
        return ValidationResult.success()

    previous = last_contract_bid(game.bids)
    if previous is not None and bid.ordinal <= previous.ordinal:
        return ValidationResult.error(
            BID_TOO_LOW,
            f"Invalid bid. Bid must be higher than the last bid ({previous.token})."
        )

    return ValidationResult.success()


def validate_play(game: GameState, seat: str, card: Card) -> ValidationResult:
    """
    Validate a card play attempt.

    Args:
        game: Current match state
        seat: Seat attempting the play
        card: Card being played

    Returns:
        ValidationResult with validation outcome
    """
    check = validate_turn(game, PHASE_PLAYING, seat)
    if not check.valid:
        return check

    hand = game.hands.get(seat, [])
    if card not in hand:
        return ValidationResult.error(CARD_NOT_IN_HAND, f"You do not hold {card}")

    if game.current_trick:
        lead_suit = game.current_trick[0].card.suit
        if card.suit != lead_suit and any(c.suit == lead_suit for c in hand):
            return ValidationResult.error(
                MUST_FOLLOW_SUIT,
                f"You must follow suit {lead_suit}"
            )

    return ValidationResult.success()


def validate_chat(phase: str, message, rules: RuleConfig = default_rules) -> ValidationResult:
    """Chat is relayed only between deals and must fit the length cap."""
    if phase not in rules.chat_phases:
        return ValidationResult.error(
            CHAT_NOT_ALLOWED,
            "Chat is only available before the game starts and after the game ends"
        )

    text = message.strip() if isinstance(message, str) else ""
    if not text or len(message) > rules.max_chat_length:
        return ValidationResult.error(
            INVALID_CHAT,
            f"Chat messages must be between 1 and {rules.max_chat_length} characters"
        )

    return ValidationResult.success()


def validate_name(name, rules: RuleConfig = default_rules) -> ValidationResult:
    text = name.strip() if isinstance(name, str) else ""
    if not text or len(text) > rules.max_name_length:
        return ValidationResult.error(
            INVALID_NAME,
            f"Names must be between 1 and {rules.max_name_length} characters"
        )
    return ValidationResult.success()
