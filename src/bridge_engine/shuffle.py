"""
Card shuffling and dealing utilities.
"""

import random
from typing import Dict, List, Optional

from .constants import HAND_SIZE, RANKS, SEATS, SUITS, suit_order
from .models import Card


def create_deck() -> List[Card]:
    """Create the 52-card deck in suit and rank order."""
    deck = []
    for suit in SUITS:
        for rank in RANKS:
            deck.append(Card(suit=suit, rank=rank))
    return deck


def shuffle_deck(
    deck: List[Card],
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> List[Card]:
    """
    Fisher-Yates shuffle of a copy of the deck.

    Args:
        deck: Cards to shuffle
        seed: Optional seed for deterministic shuffling
        rng: Optional random source; takes precedence over seed

    Returns:
        Shuffled copy of the deck
    """
    if rng is None:
        rng = random.Random(seed) if seed is not None else random.Random()

    deck_copy = deck.copy()
    for i in range(len(deck_copy) - 1, 0, -1):
        j = rng.randint(0, i)
        deck_copy[i], deck_copy[j] = deck_copy[j], deck_copy[i]
    return deck_copy


def new_shuffled_deck(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> List[Card]:
    return shuffle_deck(create_deck(), seed=seed, rng=rng)


def sort_hand(hand: List[Card]) -> List[Card]:
    """Sort by suit precedence (♠ ♥ ♦ ♣), then by descending rank."""
    return sorted(hand, key=lambda card: (suit_order(card.suit), -card.value))


def deal_cards(deck: List[Card]) -> Dict[str, List[Card]]:
    """
    Deal the deck round-robin starting with north.

    Args:
        deck: Shuffled 52-card deck

    Returns:
        Dictionary mapping seat to its sorted 13-card hand
    """
    if len(deck) != HAND_SIZE * len(SEATS):
        raise ValueError(f"Expected {HAND_SIZE * len(SEATS)} cards, got {len(deck)}")

    hands: Dict[str, List[Card]] = {seat: [] for seat in SEATS}
    for i, card in enumerate(deck):
        hands[SEATS[i % len(SEATS)]].append(card)

    return {seat: sort_hand(hand) for seat, hand in hands.items()}
