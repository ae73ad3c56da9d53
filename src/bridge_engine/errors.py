# bridge_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
INVALID_EVENT = "INVALID_EVENT"
ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
ROOM_FULL = "ROOM_FULL"
WRONG_PASSWORD = "WRONG_PASSWORD"
NAME_TAKEN = "NAME_TAKEN"
INVALID_NAME = "INVALID_NAME"
NOT_IN_ROOM = "NOT_IN_ROOM"
ALREADY_IN_ROOM = "ALREADY_IN_ROOM"
WRONG_PHASE = "WRONG_PHASE"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
POSITION_TAKEN = "POSITION_TAKEN"
INVALID_POSITION = "INVALID_POSITION"
INVALID_BID = "INVALID_BID"
BID_TOO_LOW = "BID_TOO_LOW"
INVALID_CARD = "INVALID_CARD"
CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
MUST_FOLLOW_SUIT = "MUST_FOLLOW_SUIT"
CHAT_NOT_ALLOWED = "CHAT_NOT_ALLOWED"
INVALID_CHAT = "INVALID_CHAT"
INTERNAL_ERROR = "INTERNAL_ERROR"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
