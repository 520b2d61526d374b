"""Registry of live connections and their declared roles."""

import logging
import uuid
from collections import Counter
from typing import Any

from quiz_buzzer.models.connection import Connection, ConnectionRole

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Index of live connections. Not authoritative over teams or rounds."""

    def __init__(self):
        self._connections: dict[str, Connection] = {}

    def connect(self, websocket: Any, authenticated: bool = False) -> Connection:
        """Track a newly accepted connection as a guest."""
        connection_id = uuid.uuid4().hex
        connection = Connection(
            id=connection_id,
            websocket=websocket,
            authenticated=authenticated,
        )
        self._connections[connection_id] = connection
        logger.info(f"Socket connected: {connection_id} (authenticated={authenticated})")
        return connection

    def register(
        self,
        connection_id: str,
        role: str,
        team_id: str | None = None,
    ) -> Connection | None:
        """Set role metadata for a connection.

        The team id is not checked against the team registry. An admin claim
        from a connection that did not authenticate is downgraded to guest.
        """
        connection = self._connections.get(connection_id)
        if connection is None:
            logger.warning(f"Register for unknown connection: {connection_id}")
            return None

        try:
            declared = ConnectionRole(role)
        except ValueError:
            logger.warning(f"Socket {connection_id} declared unknown role {role!r}, using guest")
            declared = ConnectionRole.GUEST

        if declared == ConnectionRole.ADMIN and not connection.authenticated:
            logger.warning(f"Socket {connection_id} claimed admin without authenticating, using guest")
            declared = ConnectionRole.GUEST

        connection.role = declared
        connection.team_id = team_id if declared == ConnectionRole.TEAM and team_id else None
        logger.info(
            f"Socket {connection_id} registered as {declared.value}"
            + (f" for team {connection.team_id}" if connection.team_id else "")
        )
        return connection

    def unregister(self, connection_id: str) -> None:
        """Forget a connection. No effect on quiz state."""
        if self._connections.pop(connection_id, None) is not None:
            logger.info(f"Socket disconnected: {connection_id}")

    def get(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def connections(self) -> list[Connection]:
        return list(self._connections.values())

    def counts_by_role(self) -> dict[str, int]:
        counts = Counter(c.role.value for c in self._connections.values())
        return {role.value: counts.get(role.value, 0) for role in ConnectionRole}

    def __len__(self) -> int:
        return len(self._connections)
