"""Authoritative contract bridge game engine and WebSocket server."""

__version__ = "1.0.0"
