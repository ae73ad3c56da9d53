"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import (
    RANK_VALUES, RED_SUITS, SEATS, SPECIAL_CALLS, PHASE_WAITING, NS, EW, empty_seat_map
)


@dataclass(frozen=True)
class Card:
    suit: str
    rank: str

    @property
    def value(self) -> int:
        return RANK_VALUES[self.rank]

    @property
    def color(self) -> str:
        return 'red' if self.suit in RED_SUITS else 'black'

    def to_dict(self) -> dict:
        return {
            "suit": self.suit,
            "rank": self.rank,
            "value": self.value,
            "color": self.color,
        }

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"


@dataclass(frozen=True)
class Bid:
    seat: str
    token: str
    level: int  # 0 for pass/double/redouble
    strain: str  # c|d|h|s|nt|pass|double|redouble
    ordinal: int = 0

    @property
    def is_call(self) -> bool:
        """True for a real contract bid, False for pass/double/redouble."""
        return self.strain not in SPECIAL_CALLS

    def to_dict(self) -> dict:
        return {
            "player": self.seat,
            "bid": self.token,
            "level": self.level,
            "suit": self.strain,
        }


@dataclass(frozen=True)
class Play:
    card: Card
    seat: str

    def to_dict(self) -> dict:
        return {"card": self.card.to_dict(), "player": self.seat}


@dataclass
class Player:
    id: str  # connection id
    name: str
    seat: str


@dataclass
class GameState:
    phase: str = PHASE_WAITING  # waiting|bidding|playing|finished
    hands: Dict[str, List[Card]] = field(default_factory=lambda: {seat: [] for seat in SEATS})
    turn: Optional[str] = None
    bids: List[Bid] = field(default_factory=list)
    contract: Optional[Bid] = None
    declarer: Optional[str] = None
    dummy: Optional[str] = None
    tricks: List[List[Play]] = field(default_factory=list)
    current_trick: List[Play] = field(default_factory=list)
    trick_leader: Optional[str] = None
    trick_pending: bool = False  # four cards on the table, waiting to be sealed
    tricks_won: Dict[str, int] = field(default_factory=lambda: {NS: 0, EW: 0})
    deal_number: int = 0

    def cards_in_play(self) -> int:
        return sum(len(trick) for trick in self.tricks) + len(self.current_trick)


@dataclass
class RoomState:
    code: str
    password: Optional[str] = None
    version: int = 0
    players: Dict[str, Player] = field(default_factory=dict)
    game: GameState = field(default_factory=GameState)

    def player_at(self, seat: str) -> Optional[Player]:
        for player in self.players.values():
            if player.seat == seat:
                return player
        return None

    def seat_names(self) -> Dict[str, Optional[str]]:
        names = empty_seat_map()
        for player in self.players.values():
            names[player.seat] = player.name
        return names

    def is_full(self) -> bool:
        return len(self.players) >= 4
