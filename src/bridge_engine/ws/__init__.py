"""
WebSocket server and event handling for the bridge table.
"""

from .events import *
from .server import BridgeServer, ConnectionManager, create_app

__all__ = ["BridgeServer", "ConnectionManager", "create_app"]
