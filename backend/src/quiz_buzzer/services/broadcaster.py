"""Fan-out of state snapshots to live connections."""

import asyncio
import logging

from quiz_buzzer.models.connection import Connection
from quiz_buzzer.models.round import RoundPhase
from quiz_buzzer.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

TEAM_LIST_UPDATE = "teamListUpdate"
BUZZER_RESULT = "buzzerResult"
QUESTION_STARTED = "questionStarted"
QUESTION_RESET = "questionReset"


def team_list_message(teams: dict[str, dict]) -> dict:
    return {"type": TEAM_LIST_UPDATE, "teams": teams}


def ranking_message(ranked: list[dict]) -> dict:
    return {"type": BUZZER_RESULT, "ranked": ranked}


def phase_message(phase: RoundPhase) -> dict:
    """questionStarted while a round is active, questionReset otherwise."""
    if phase == RoundPhase.ACTIVE:
        return {"type": QUESTION_STARTED}
    return {"type": QUESTION_RESET}


class Broadcaster:
    """Sends full snapshots to every connection, without filtering.

    Sends run concurrently. A connection whose send fails or times out is
    closed and dropped from the session registry, which ends its read loop;
    the client reconnects and registers again to get a fresh snapshot.
    """

    def __init__(self, sessions: SessionRegistry, send_timeout: float = 5.0):
        self.sessions = sessions
        self.send_timeout = send_timeout

    async def send(self, connection: Connection, message: dict) -> bool:
        """Send one message to one connection. Returns False if it failed."""
        if connection.websocket is None:
            return False
        try:
            await asyncio.wait_for(
                connection.websocket.send_json(message),
                timeout=self.send_timeout,
            )
            return True
        except asyncio.TimeoutError:
            logger.warning(f"Send to {connection.id} timed out after {self.send_timeout}s")
        except Exception as e:
            logger.debug(f"Send to {connection.id} failed: {type(e).__name__}: {e}")
        return False

    async def drop(self, connection: Connection) -> None:
        """Close a connection that missed a message and forget it."""
        self.sessions.unregister(connection.id)
        if connection.websocket is None:
            return
        try:
            await asyncio.wait_for(
                connection.websocket.close(code=1011),
                timeout=self.send_timeout,
            )
        except Exception as e:
            logger.debug(f"Close of {connection.id} failed: {type(e).__name__}: {e}")

    async def broadcast(self, message: dict) -> int:
        """Send a message to all live connections. Returns the delivery count."""
        connections = self.sessions.connections()
        results = await asyncio.gather(*(self.send(c, message) for c in connections))

        dead_connections = [c for c, ok in zip(connections, results) if not ok]
        for connection in dead_connections:
            await self.drop(connection)
        if dead_connections:
            logger.debug(f"Cleaned {len(dead_connections)} dead connection(s)")
        return len(connections) - len(dead_connections)
