"""
FastAPI WebSocket server for the bridge table.
"""

import logging
import random
import uuid
from typing import Dict, Optional, Protocol, Tuple

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..comparator import parse_card
from ..engine import (
    EngineResult, change_position, complete_trick, join_room, leave_room,
    new_game, place_bid, play_card, start_game, update_name
)
from ..errors import ALREADY_IN_ROOM, INTERNAL_ERROR, NOT_IN_ROOM, GameError, raise_error
from ..models import Player, RoomState
from ..registry import RoomRegistry, SessionRegistry
from ..rules import RuleConfig, default_rules
from ..scheduler import AsyncioScheduler
from ..serialization import player_summary, sanitize_state
from ..validate import validate_chat
from .events import (
    BidEvent, ChangePositionEvent, ChatEvent, CreateRoomEvent, JoinRoomEvent,
    JoinedRoomEvent, NameUpdatedEvent, NewGameEvent, OutboundEvent, PlayCardEvent,
    PlayerJoinedEvent, PlayerLeftEvent, PositionChange, PositionChangedEvent,
    RoomFullEvent, StartGameEvent, UpdateNameEvent, create_chat_event,
    create_error_event, create_game_state_event, parse_inbound_event, seat_player
)

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Delivers encoded messages to one connection."""

    async def send(self, connection_id: str, text: str) -> None:
        ...


class ConnectionManager:
    """Manages WebSocket connections."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = str(uuid.uuid4())[:8]
        self.active_connections[connection_id] = websocket
        logger.info(f"Connection {connection_id} accepted")
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        if self.active_connections.pop(connection_id, None) is not None:
            logger.info(f"Connection {connection_id} closed")

    async def send(self, connection_id: str, text: str) -> None:
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return
        try:
            await websocket.send_text(text)
        except Exception as e:
            logger.error(f"Error sending to {connection_id}: {e}")
            self.disconnect(connection_id)


class BridgeServer:
    """
    Routes inbound events to rooms and fans out the results.

    Every handler validates and applies its transition without awaiting, so
    one message's state change always completes before the next is handled.
    """

    def __init__(
        self,
        transport: Transport,
        rules: RuleConfig = default_rules,
        scheduler=None,
        rng: Optional[random.Random] = None
    ):
        self.transport = transport
        self.rules = rules
        self.scheduler = scheduler or AsyncioScheduler()
        self.rng = rng
        self.rooms = RoomRegistry(rules, rng)
        self.sessions = SessionRegistry()

    # Outbound helpers

    async def send(self, connection_id: str, event: OutboundEvent) -> None:
        await self.transport.send(connection_id, event.to_json())

    async def send_error(self, connection_id: str, code: str, message: str) -> None:
        await self.send(connection_id, create_error_event(code, message))

    async def broadcast(self, room: RoomState, event: OutboundEvent) -> None:
        text = event.to_json()
        for connection_id in self.sessions.connections_in(room.code):
            await self.transport.send(connection_id, text)

    async def broadcast_state(self, room: RoomState) -> None:
        """Send each occupant a snapshot showing only their own hand."""
        for connection_id in self.sessions.connections_in(room.code):
            player = room.players.get(connection_id)
            seat = player.seat if player else None
            await self.send(connection_id, create_game_state_event(sanitize_state(room, seat)))

    async def _reject(self, connection_id: str, result: EngineResult) -> None:
        logger.info(f"Rejected action from {connection_id}: {result.error_message}")
        await self.send_error(connection_id, result.error_code, result.error_message)

    def _require_player(self, connection_id: str) -> Tuple[RoomState, Player]:
        session = self.sessions.get(connection_id)
        if session is None or session.room_code not in self.rooms:
            raise_error(NOT_IN_ROOM, "Not in a room")
        room = self.rooms.get(session.room_code)
        player = room.players.get(connection_id)
        if player is None:
            raise_error(NOT_IN_ROOM, "Not in a room")
        return room, player

    # Inbound

    async def handle_message(self, connection_id: str, raw) -> None:
        """Parse and dispatch one inbound message; malformed input is dropped."""
        try:
            event = parse_inbound_event(raw)
        except ValueError as e:
            logger.warning(f"Dropped message from {connection_id}: {e}")
            return

        try:
            await self.handle_event(connection_id, event)
        except GameError as e:
            await self.send_error(connection_id, e.code, e.message)
        except Exception:
            logger.exception(f"Error handling {event.type.value} from {connection_id}")
            await self.send_error(connection_id, INTERNAL_ERROR, "Internal server error")

    async def handle_event(self, connection_id: str, event) -> None:
        if isinstance(event, CreateRoomEvent):
            await self.handle_create_room(connection_id, event)
        elif isinstance(event, JoinRoomEvent):
            await self.handle_join_room(connection_id, event)
        elif isinstance(event, StartGameEvent):
            await self.handle_start_game(connection_id, event)
        elif isinstance(event, BidEvent):
            await self.handle_bid(connection_id, event)
        elif isinstance(event, PlayCardEvent):
            await self.handle_play_card(connection_id, event)
        elif isinstance(event, ChangePositionEvent):
            await self.handle_change_position(connection_id, event)
        elif isinstance(event, ChatEvent):
            await self.handle_chat(connection_id, event)
        elif isinstance(event, UpdateNameEvent):
            await self.handle_update_name(connection_id, event)
        elif isinstance(event, NewGameEvent):
            await self.handle_new_game(connection_id, event)
        else:
            raise ValueError(f"Unhandled event type: {type(event)}")

    async def handle_create_room(self, connection_id: str, event: CreateRoomEvent) -> None:
        if self.sessions.get(connection_id) is not None:
            raise_error(ALREADY_IN_ROOM, "Leave your current room first")
        room = self.rooms.create(event.password)
        await self._join(connection_id, room, event.player_name, event.password)

    async def handle_join_room(self, connection_id: str, event: JoinRoomEvent) -> None:
        if self.sessions.get(connection_id) is not None:
            raise_error(ALREADY_IN_ROOM, "Leave your current room first")
        room = self.rooms.get(event.room_code)
        await self._join(connection_id, room, event.player_name, event.password)

    async def _join(self, connection_id: str, room: RoomState, name: str, password: Optional[str]) -> None:
        result = join_room(room, connection_id, name, password, self.rules)
        if not result.success:
            self.rooms.discard_if_empty(room.code)
            await self._reject(connection_id, result)
            return

        self.sessions.bind(connection_id, room.code)
        player = room.players[connection_id]
        summary = player_summary(room)

        await self.send(connection_id, JoinedRoomEvent(
            room_code=room.code, position=player.seat, **_snake(summary)
        ))
        await self.broadcast(room, PlayerJoinedEvent(
            player=seat_player(player.name, player.seat), **_snake(summary)
        ))
        if room.is_full():
            await self.broadcast(room, RoomFullEvent())
        await self.broadcast_state(room)

    async def handle_start_game(self, connection_id: str, event: StartGameEvent) -> None:
        room, _ = self._require_player(connection_id)
        result = start_game(room, rng=self.rng)
        if not result.success:
            await self._reject(connection_id, result)
            return
        await self.broadcast_state(room)

    async def handle_bid(self, connection_id: str, event: BidEvent) -> None:
        room, player = self._require_player(connection_id)
        result = place_bid(room, player.seat, event.bid, rng=self.rng, rules=self.rules)
        if not result.success:
            await self._reject(connection_id, result)
            return
        await self.broadcast_state(room)

    async def handle_play_card(self, connection_id: str, event: PlayCardEvent) -> None:
        room, player = self._require_player(connection_id)
        card = parse_card(event.card.model_dump())
        result = play_card(room, player.seat, card)
        if not result.success:
            await self._reject(connection_id, result)
            return

        await self.broadcast_state(room)
        if room.game.trick_pending:
            self.scheduler.call_later(
                self.rules.trick_display_delay,
                lambda: self._complete_trick(room)
            )

    async def _complete_trick(self, room: RoomState) -> None:
        result = complete_trick(room)
        if not result.success:
            logger.warning(f"Room {room.code}: deferred trick resolution skipped: {result.error_message}")
            return
        if self.rooms.is_live(room):
            await self.broadcast_state(room)

    async def handle_change_position(self, connection_id: str, event: ChangePositionEvent) -> None:
        room, player = self._require_player(connection_id)
        old_position = player.seat
        result = change_position(room, connection_id, event.new_position)
        if not result.success:
            await self._reject(connection_id, result)
            return

        await self.broadcast(room, PositionChangedEvent(
            player=PositionChange(
                name=player.name, old_position=old_position, new_position=player.seat
            ),
            player_names=room.seat_names(),
        ))
        await self.broadcast_state(room)

    async def handle_chat(self, connection_id: str, event: ChatEvent) -> None:
        room, player = self._require_player(connection_id)
        check = validate_chat(room.game.phase, event.message, self.rules)
        if not check.valid:
            await self.send_error(connection_id, check.error_code, check.error_message)
            return
        await self.broadcast(room, create_chat_event(player.name, event.message.strip()))

    async def handle_update_name(self, connection_id: str, event: UpdateNameEvent) -> None:
        room, player = self._require_player(connection_id)
        old_name = player.name
        result = update_name(room, connection_id, event.new_name, self.rules)
        if not result.success:
            await self._reject(connection_id, result)
            return

        await self.broadcast(room, NameUpdatedEvent(
            position=player.seat,
            old_name=old_name,
            new_name=player.name,
            player_names=room.seat_names(),
        ))
        await self.broadcast_state(room)

    async def handle_new_game(self, connection_id: str, event: NewGameEvent) -> None:
        room, _ = self._require_player(connection_id)
        result = new_game(room)
        if not result.success:
            await self._reject(connection_id, result)
            return
        await self.broadcast_state(room)

    async def handle_disconnect(self, connection_id: str) -> None:
        """Vacate the seat, tell the room, and drop the room once it is empty."""
        session = self.sessions.unbind(connection_id)
        if session is None or session.room_code not in self.rooms:
            return

        room = self.rooms.get(session.room_code)
        player = room.players.get(connection_id)
        result = leave_room(room, connection_id)
        if not result.success:
            return

        if self.rooms.discard_if_empty(room.code):
            return

        await self.broadcast(room, PlayerLeftEvent(
            player=seat_player(player.name, player.seat), **_snake(player_summary(room))
        ))
        await self.broadcast_state(room)


def _snake(summary: dict) -> dict:
    return {"players_count": summary["playersCount"], "player_names": summary["playerNames"]}


def create_app(
    rules: RuleConfig = default_rules,
    scheduler=None,
    rng: Optional[random.Random] = None
) -> FastAPI:
    """Build the FastAPI application with its own room and session stores."""
    app = FastAPI(title="Bridge Game Engine", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    manager = ConnectionManager()
    server = BridgeServer(manager, rules=rules, scheduler=scheduler, rng=rng)
    app.state.bridge = server
    app.state.connections = manager

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "rooms": len(server.rooms),
            "connections": len(manager.active_connections),
        }

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Main WebSocket endpoint."""
        connection_id = await manager.connect(websocket)
        try:
            while True:
                raw_data = await websocket.receive_text()
                await server.handle_message(connection_id, raw_data)
        except WebSocketDisconnect:
            logger.info(f"WebSocket {connection_id} disconnected")
        finally:
            manager.disconnect(connection_id)
            await server.handle_disconnect(connection_id)

    return app
