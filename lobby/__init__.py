"""Room host package: wraps the game rooms with WebSocket networking."""

from .broadcaster import Broadcaster
from .coordinator import ConnectionCoordinator
from .server import RoomServer, ServerConfig

__all__ = ["Broadcaster", "ConnectionCoordinator", "RoomServer", "ServerConfig"]
