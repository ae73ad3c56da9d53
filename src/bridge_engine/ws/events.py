"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_ROOM = "create_room"
    JOIN_ROOM = "join_room"
    START_GAME = "start_game"
    BID = "bid"
    PLAY_CARD = "play_card"
    CHANGE_POSITION = "change_position"
    CHAT_MESSAGE = "chat_message"
    UPDATE_NAME = "update_name"
    NEW_GAME = "new_game"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    JOINED_ROOM = "joined_room"
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    ROOM_FULL = "room_full"
    POSITION_CHANGED = "position_changed"
    NAME_UPDATED = "name_updated"
    GAME_STATE = "game_state"
    CHAT_MESSAGE = "chat_message"
    ERROR = "error"


class WireModel(BaseModel):
    """Wire format uses camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Inbound event models
class BaseEvent(WireModel):
    """Base event model."""
    type: EventType


class CreateRoomEvent(BaseEvent):
    """Create room event."""
    type: EventType = EventType.CREATE_ROOM
    player_name: str = Field(..., min_length=1, max_length=50)
    password: Optional[str] = None


class JoinRoomEvent(BaseEvent):
    """Join room event."""
    type: EventType = EventType.JOIN_ROOM
    room_code: str = Field(..., min_length=1, max_length=20)
    player_name: str = Field(..., min_length=1, max_length=50)
    password: Optional[str] = None


class StartGameEvent(BaseEvent):
    """Start game event."""
    type: EventType = EventType.START_GAME


class BidEvent(BaseEvent):
    """Auction call event."""
    type: EventType = EventType.BID
    bid: str = Field(..., min_length=1, max_length=10)


class CardPayload(WireModel):
    suit: str
    rank: str


class PlayCardEvent(BaseEvent):
    """Play card event."""
    type: EventType = EventType.PLAY_CARD
    card: CardPayload


class ChangePositionEvent(BaseEvent):
    """Change seat event."""
    type: EventType = EventType.CHANGE_POSITION
    new_position: str


class ChatEvent(BaseEvent):
    """Chat message event. Length is checked by the room, not here."""
    type: EventType = EventType.CHAT_MESSAGE
    message: str


class UpdateNameEvent(BaseEvent):
    """Rename event."""
    type: EventType = EventType.UPDATE_NAME
    new_name: str


class NewGameEvent(BaseEvent):
    """Reset a finished room to the lobby."""
    type: EventType = EventType.NEW_GAME


# Union type for all inbound events
InboundEvent = Union[
    CreateRoomEvent,
    JoinRoomEvent,
    StartGameEvent,
    BidEvent,
    PlayCardEvent,
    ChangePositionEvent,
    ChatEvent,
    UpdateNameEvent,
    NewGameEvent,
]

EVENT_MAP = {
    EventType.CREATE_ROOM: CreateRoomEvent,
    EventType.JOIN_ROOM: JoinRoomEvent,
    EventType.START_GAME: StartGameEvent,
    EventType.BID: BidEvent,
    EventType.PLAY_CARD: PlayCardEvent,
    EventType.CHANGE_POSITION: ChangePositionEvent,
    EventType.CHAT_MESSAGE: ChatEvent,
    EventType.UPDATE_NAME: UpdateNameEvent,
    EventType.NEW_GAME: NewGameEvent,
}


# Outbound event models
class OutboundEvent(WireModel):
    type: OutboundEventType
    timestamp: float = Field(default_factory=time.time)

    def to_json(self) -> str:
        return orjson.dumps(self.model_dump(by_alias=True, mode="json")).decode()


class SeatPlayer(WireModel):
    name: str
    position: str


class PositionChange(WireModel):
    name: str
    old_position: str
    new_position: str


class JoinedRoomEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.JOINED_ROOM
    room_code: str
    position: str
    players_count: int
    player_names: Dict[str, Optional[str]]


class PlayerJoinedEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.PLAYER_JOINED
    player: SeatPlayer
    players_count: int
    player_names: Dict[str, Optional[str]]


class PlayerLeftEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.PLAYER_LEFT
    player: SeatPlayer
    players_count: int
    player_names: Dict[str, Optional[str]]


class RoomFullEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.ROOM_FULL
    message: str = "All players joined. Ready to start!"


class PositionChangedEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.POSITION_CHANGED
    player: PositionChange
    player_names: Dict[str, Optional[str]]


class NameUpdatedEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.NAME_UPDATED
    position: str
    old_name: str
    new_name: str
    player_names: Dict[str, Optional[str]]


class GameStateEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.GAME_STATE
    game_state: Dict[str, Any]


class ChatMessageEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.CHAT_MESSAGE
    sender: str
    message: str


class ErrorEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.ERROR
    code: str
    message: str


def parse_inbound_event(data: Any) -> InboundEvent:
    """
    Parse raw event data into the matching event model.

    Args:
        data: Raw text or decoded JSON object from the WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If the payload is not JSON, the type is unknown or fields are invalid
    """
    if isinstance(data, (str, bytes)):
        try:
            data = orjson.loads(data)
        except orjson.JSONDecodeError as e:
            raise ValueError(f"Malformed JSON: {e}")

    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")
    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_class = EVENT_MAP[event_type]
    try:
        return event_class(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e}")


def create_error_event(code: str, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message)


def create_game_state_event(state: Dict[str, Any]) -> GameStateEvent:
    """Create a game_state event."""
    return GameStateEvent(game_state=state)


def create_chat_event(sender: str, message: str) -> ChatMessageEvent:
    """Create a chat message event."""
    return ChatMessageEvent(sender=sender, message=message)


def seat_player(name: str, position: str) -> SeatPlayer:
    return SeatPlayer(name=name, position=position)


__all__: List[str] = [
    "EventType", "OutboundEventType", "InboundEvent", "EVENT_MAP",
    "CreateRoomEvent", "JoinRoomEvent", "StartGameEvent", "BidEvent", "PlayCardEvent",
    "ChangePositionEvent", "ChatEvent", "UpdateNameEvent", "NewGameEvent",
    "OutboundEvent", "JoinedRoomEvent", "PlayerJoinedEvent", "PlayerLeftEvent",
    "RoomFullEvent", "PositionChangedEvent", "NameUpdatedEvent", "GameStateEvent",
    "ChatMessageEvent", "ErrorEvent", "PositionChange", "SeatPlayer",
    "parse_inbound_event", "create_error_event", "create_game_state_event",
    "create_chat_event", "seat_player",
]
