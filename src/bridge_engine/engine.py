"""Match state machine: room membership, dealing, auction and trick play"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from .bidding import is_bidding_complete, is_passed_out, parse_bid
from .comparator import trick_winner, trump_suit_for
from .constants import (
    PHASE_BIDDING, PHASE_FINISHED, PHASE_PLAYING, PHASE_WAITING, SEATS,
    TRICKS_PER_DEAL, next_seat, partner_of, partnership_of
)
from .errors import (
    ALREADY_IN_ROOM, INVALID_POSITION, NAME_TAKEN, NOT_ENOUGH_PLAYERS, NOT_IN_ROOM,
    POSITION_TAKEN, ROOM_FULL, WRONG_PASSWORD, WRONG_PHASE, GameError
)
from .models import Card, GameState, Play, Player, RoomState
from .rules import RuleConfig, default_rules
from .shuffle import deal_cards, new_shuffled_deck
from .validate import validate_bid, validate_name, validate_play, validate_turn

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    success: bool
    state: Optional[RoomState] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, state: RoomState) -> 'EngineResult':
        state.version += 1
        return cls(success=True, state=state)

    @classmethod
    def fail(cls, state: RoomState, error_code: str, error_message: str) -> 'EngineResult':
        return cls(success=False, state=state, error_code=error_code, error_message=error_message)


def create_room(code: str, password: Optional[str] = None) -> RoomState:
    return RoomState(code=code, password=password or None)


def _name_taken(room: RoomState, name: str, exclude_id: Optional[str] = None) -> bool:
    lowered = name.lower()
    return any(
        p.name.lower() == lowered and p.id != exclude_id
        for p in room.players.values()
    )


def join_room(
    room: RoomState,
    player_id: str,
    name: str,
    password: Optional[str] = None,
    rules: RuleConfig = default_rules
) -> EngineResult:
    """
    Seat a new player at the first open seat, north first.

    The room password is checked when one is set, and names must be unique
    within the room ignoring case.
    """
    if player_id in room.players:
        return EngineResult.fail(room, ALREADY_IN_ROOM, "You are already in this room")

    if room.password and room.password != password:
        return EngineResult.fail(room, WRONG_PASSWORD, "Incorrect password")

    if room.is_full():
        return EngineResult.fail(room, ROOM_FULL, "Room is full")

    check = validate_name(name, rules)
    if not check.valid:
        return EngineResult.fail(room, check.error_code, check.error_message)
    name = name.strip()

    if _name_taken(room, name):
        return EngineResult.fail(
            room, NAME_TAKEN,
            f'Name "{name}" is already taken in this room. Please choose a different name.'
        )

    seat = next(s for s in SEATS if room.player_at(s) is None)
    room.players[player_id] = Player(id=player_id, name=name, seat=seat)
    logger.info(f"{name} joined room {room.code} at {seat}")
    return EngineResult.ok(room)


def leave_room(room: RoomState, player_id: str) -> EngineResult:
    """Remove a player; their seat stays vacant until someone takes it."""
    player = room.players.pop(player_id, None)
    if player is None:
        return EngineResult.fail(room, NOT_IN_ROOM, "Not in a room")
    logger.info(f"{player.name} left room {room.code} ({player.seat})")
    return EngineResult.ok(room)


def change_position(room: RoomState, player_id: str, new_position: str) -> EngineResult:
    player = room.players.get(player_id)
    if player is None:
        return EngineResult.fail(room, NOT_IN_ROOM, "Not in a room")

    if room.game.phase != PHASE_WAITING:
        return EngineResult.fail(room, WRONG_PHASE, "Cannot change position after game has started")

    if new_position not in SEATS:
        return EngineResult.fail(room, INVALID_POSITION, f"Unknown position: {new_position}")

    if room.player_at(new_position) is not None:
        return EngineResult.fail(room, POSITION_TAKEN, "Position is already occupied")

    player.seat = new_position
    return EngineResult.ok(room)


def update_name(
    room: RoomState,
    player_id: str,
    new_name: str,
    rules: RuleConfig = default_rules
) -> EngineResult:
    player = room.players.get(player_id)
    if player is None:
        return EngineResult.fail(room, NOT_IN_ROOM, "Not in a room")

    check = validate_name(new_name, rules)
    if not check.valid:
        return EngineResult.fail(room, check.error_code, check.error_message)
    new_name = new_name.strip()

    if _name_taken(room, new_name, exclude_id=player_id):
        return EngineResult.fail(
            room, NAME_TAKEN,
            f'Name "{new_name}" is already taken in this room. Please choose a different name.'
        )

    player.name = new_name
    return EngineResult.ok(room)


def _deal(game: GameState, rng: Optional[random.Random] = None) -> None:
    """Deal fresh hands and open the auction with north."""
    game.hands = deal_cards(new_shuffled_deck(rng=rng))
    game.phase = PHASE_BIDDING
    game.turn = SEATS[0]
    game.bids = []
    game.contract = None
    game.declarer = None
    game.dummy = None
    game.tricks = []
    game.current_trick = []
    game.trick_leader = None
    game.trick_pending = False
    game.tricks_won = {side: 0 for side in game.tricks_won}
    game.deal_number += 1


def start_game(
    room: RoomState,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> EngineResult:
    """Deal and open the auction. Needs all four seats occupied."""
    if len(room.players) != len(SEATS):
        return EngineResult.fail(room, NOT_ENOUGH_PLAYERS, "Cannot start game. Need 4 players to start.")

    if room.game.phase not in (PHASE_WAITING, PHASE_FINISHED):
        return EngineResult.fail(room, WRONG_PHASE, "A game is already in progress")

    if rng is None and seed is not None:
        rng = random.Random(seed)

    _deal(room.game, rng)
    logger.info(f"Room {room.code}: deal {room.game.deal_number} started")
    return EngineResult.ok(room)


def place_bid(
    room: RoomState,
    seat: str,
    token: str,
    rng: Optional[random.Random] = None,
    rules: RuleConfig = default_rules
) -> EngineResult:
    """
    Apply one call of the auction.

    A real bid becomes the contract with its bidder as declarer. The auction
    closes after three passes that follow a contract; play then starts with
    the seat to the declarer's left. Four passes without a contract redeal.
    """
    game = room.game
    check = validate_turn(game, PHASE_BIDDING, seat)
    if not check.valid:
        return EngineResult.fail(room, check.error_code, check.error_message)

    try:
        bid = parse_bid(seat, token)
    except GameError as e:
        return EngineResult.fail(room, e.code, e.message)

    check = validate_bid(game, bid)
    if not check.valid:
        return EngineResult.fail(room, check.error_code, check.error_message)

    game.bids.append(bid)
    if bid.is_call:
        game.contract = bid
        game.declarer = seat
        game.dummy = partner_of(seat)

    if is_bidding_complete(game.bids, game.contract):
        game.phase = PHASE_PLAYING
        game.turn = next_seat(game.declarer)
        logger.info(f"Room {room.code}: contract {game.contract.token} by {game.declarer}")
    elif is_passed_out(game.bids, game.contract) and rules.redeal_on_pass_out:
        logger.info(f"Room {room.code}: deal {game.deal_number} passed out, redealing")
        _deal(game, rng)
    else:
        game.turn = next_seat(seat)

    return EngineResult.ok(room)


def play_card(room: RoomState, seat: str, card: Card) -> EngineResult:
    """
    Play one card to the open trick.

    The fourth card leaves the trick on the table with no seat to act until
    complete_trick seals it.
    """
    game = room.game
    check = validate_play(game, seat, card)
    if not check.valid:
        return EngineResult.fail(room, check.error_code, check.error_message)

    game.hands[seat].remove(card)
    game.current_trick.append(Play(card=card, seat=seat))
    if len(game.current_trick) == 1:
        game.trick_leader = seat

    if len(game.current_trick) == len(SEATS):
        game.trick_pending = True
        game.turn = None
    else:
        game.turn = next_seat(seat)

    return EngineResult.ok(room)


def complete_trick(room: RoomState) -> EngineResult:
    """Seal the four-card trick, credit the winner and hand them the lead."""
    game = room.game
    if game.phase != PHASE_PLAYING or not game.trick_pending:
        return EngineResult.fail(room, WRONG_PHASE, "No completed trick to resolve")

    winner = trick_winner(game.current_trick, trump_suit_for(game.contract))
    game.tricks_won[partnership_of(winner.seat)] += 1
    game.tricks.append(list(game.current_trick))
    game.current_trick = []
    game.trick_pending = False
    logger.info(f"Room {room.code}: trick {len(game.tricks)} won by {winner.seat} with {winner.card}")

    if len(game.tricks) == TRICKS_PER_DEAL:
        game.phase = PHASE_FINISHED
        game.turn = None
        game.trick_leader = None
        logger.info(f"Room {room.code}: deal {game.deal_number} finished {game.tricks_won}")
    else:
        game.turn = winner.seat
        game.trick_leader = winner.seat

    return EngineResult.ok(room)


def new_game(room: RoomState) -> EngineResult:
    """Return a finished room to the lobby, keeping everyone seated."""
    if room.game.phase != PHASE_FINISHED:
        return EngineResult.fail(room, WRONG_PHASE, "The current game has not finished")

    deal_number = room.game.deal_number
    room.game = GameState(deal_number=deal_number)
    return EngineResult.ok(room)
