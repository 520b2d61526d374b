"""Live connection models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ConnectionRole(str, Enum):
    """Role a connection declares through the register event."""

    ADMIN = "admin"
    TEAM = "team"
    GUEST = "guest"


@dataclass
class Connection:
    """One live WebSocket session. Holds no authoritative quiz data."""

    id: str
    websocket: Any = None  # Active WebSocket connection
    role: ConnectionRole = ConnectionRole.GUEST
    team_id: str | None = None  # Only set when role is TEAM
    authenticated: bool = False  # Presented the admin token on connect

    @property
    def is_admin(self) -> bool:
        return self.role == ConnectionRole.ADMIN
