"""Game constants and utilities"""

from typing import Dict, Optional

SEATS = ['north', 'east', 'south', 'west']

SPADES = '♠'
HEARTS = '♥'
DIAMONDS = '♦'
CLUBS = '♣'

# Display precedence, highest first
SUITS = [SPADES, HEARTS, DIAMONDS, CLUBS]
RED_SUITS = {HEARTS, DIAMONDS}

# Letters accepted from clients in place of the symbols
SUIT_ALIASES = {
    'S': SPADES, 'H': HEARTS, 'D': DIAMONDS, 'C': CLUBS,
    'SPADES': SPADES, 'HEARTS': HEARTS, 'DIAMONDS': DIAMONDS, 'CLUBS': CLUBS,
}

RANKS = ['A', 'K', 'Q', 'J', '10', '9', '8', '7', '6', '5', '4', '3', '2']
RANK_VALUES = {
    'A': 14, 'K': 13, 'Q': 12, 'J': 11, '10': 10,
    '9': 9, '8': 8, '7': 7, '6': 6, '5': 5, '4': 4, '3': 3, '2': 2,
}

HAND_SIZE = 13
TRICKS_PER_DEAL = 13
BOOK = 6

# Strains
STRAIN_CLUBS = 'c'
STRAIN_DIAMONDS = 'd'
STRAIN_HEARTS = 'h'
STRAIN_SPADES = 's'
STRAIN_NOTRUMP = 'nt'
CALL_PASS = 'pass'
CALL_DOUBLE = 'double'
CALL_REDOUBLE = 'redouble'

SPECIAL_CALLS = (CALL_PASS, CALL_DOUBLE, CALL_REDOUBLE)

STRAIN_RANKS = {
    STRAIN_CLUBS: 1,
    STRAIN_DIAMONDS: 2,
    STRAIN_HEARTS: 3,
    STRAIN_SPADES: 4,
    STRAIN_NOTRUMP: 5,
}

STRAIN_TRUMPS = {
    STRAIN_CLUBS: CLUBS,
    STRAIN_DIAMONDS: DIAMONDS,
    STRAIN_HEARTS: HEARTS,
    STRAIN_SPADES: SPADES,
}

# Phases
PHASE_WAITING = 'waiting'
PHASE_BIDDING = 'bidding'
PHASE_PLAYING = 'playing'
PHASE_FINISHED = 'finished'

# Partnerships
NS = 'ns'
EW = 'ew'


def next_seat(seat: str) -> str:
    return SEATS[(SEATS.index(seat) + 1) % len(SEATS)]


def partner_of(seat: str) -> str:
    return SEATS[(SEATS.index(seat) + 2) % len(SEATS)]


def partnership_of(seat: str) -> str:
    return NS if seat in ('north', 'south') else EW


def empty_seat_map(default=None) -> Dict[str, Optional[object]]:
    return {seat: default for seat in SEATS}


def suit_order(suit: str) -> int:
    return SUITS.index(suit)
