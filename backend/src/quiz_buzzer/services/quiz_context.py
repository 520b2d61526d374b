"""Quiz context: the shared state and every operation that mutates it."""

import asyncio
import hmac
import logging
from typing import Any

from quiz_buzzer.models.connection import Connection
from quiz_buzzer.models.round import BuzzResult, RoundPhase
from quiz_buzzer.models.team import Team
from quiz_buzzer.services.broadcaster import (
    Broadcaster,
    phase_message,
    ranking_message,
    team_list_message,
)
from quiz_buzzer.services.round_engine import RoundEngine
from quiz_buzzer.services.session_registry import SessionRegistry
from quiz_buzzer.services.team_registry import DEFAULT_TEAM_COLOR, TeamRegistry

logger = logging.getLogger(__name__)


class QuizContext:
    """Owns the team registry, the round and the connection registry.

    Every mutation runs together with its broadcasts under a single lock, so
    positions are assigned one buzz at a time and every observer receives
    notifications in the order the mutations happened.
    """

    def __init__(
        self,
        admin_token: str = "",
        default_color: str = DEFAULT_TEAM_COLOR,
        send_timeout: float = 5.0,
    ):
        self.admin_token = admin_token
        self.teams = TeamRegistry(default_color=default_color)
        self.round = RoundEngine(self.teams)
        self.sessions = SessionRegistry()
        self.broadcaster = Broadcaster(self.sessions, send_timeout=send_timeout)
        self._lock = asyncio.Lock()

    # --- Connections ---

    def is_admin_token(self, token: str | None) -> bool:
        """Check an admin token. With no token configured everyone passes."""
        if not self.admin_token:
            return True
        if not token:
            return False
        return hmac.compare_digest(token.encode(), self.admin_token.encode())

    def connect(self, websocket: Any, token: str | None = None) -> Connection:
        return self.sessions.connect(websocket, authenticated=self.is_admin_token(token))

    def disconnect(self, connection_id: str) -> None:
        self.sessions.unregister(connection_id)

    async def register(
        self,
        connection_id: str,
        role: str = "guest",
        team_id: str | None = None,
    ) -> Connection | None:
        """Record connection metadata and push it the current state."""
        async with self._lock:
            connection = self.sessions.register(connection_id, role, team_id)
            if connection is None:
                return None
            for message in (
                team_list_message(self.teams.snapshot()),
                ranking_message(self.round.ranking_snapshot()),
                phase_message(self.round.phase),
            ):
                if not await self.broadcaster.send(connection, message):
                    await self.broadcaster.drop(connection)
                    return None
            return connection

    # --- Teams ---

    async def add_team(self, name: str, color: str | None = None) -> Team:
        async with self._lock:
            team = self.teams.add_team(name, color)
            await self._broadcast_teams()
            return team

    async def remove_all_teams(self) -> None:
        """Clear every team. Any ranking in flight is discarded with them."""
        async with self._lock:
            self.teams.clear()
            self.round.reset_round()
            await self._broadcast_teams()
            await self.broadcaster.broadcast(phase_message(RoundPhase.IDLE))
            await self._broadcast_ranking()

    # --- Rounds ---

    async def start_round(self) -> None:
        async with self._lock:
            self.round.start_round()
            await self.broadcaster.broadcast(phase_message(RoundPhase.ACTIVE))
            await self._broadcast_ranking()

    async def reset_round(self) -> None:
        async with self._lock:
            self.round.reset_round()
            await self.broadcaster.broadcast(phase_message(RoundPhase.IDLE))
            await self._broadcast_ranking()

    async def submit_buzz(self, team_id: str) -> BuzzResult:
        """Rank a buzz; only an accepted buzz is broadcast."""
        async with self._lock:
            result = self.round.submit_buzz(team_id)
            if result.accepted:
                await self._broadcast_ranking()
            return result

    # --- Snapshots ---

    def snapshot(self) -> dict:
        """Full self-consistent copy of current state."""
        return {
            "teams": self.teams.snapshot(),
            "ranked": self.round.ranking_snapshot(),
            "phase": self.round.phase.value,
            "connections": self.sessions.counts_by_role(),
        }

    async def _broadcast_teams(self) -> None:
        await self.broadcaster.broadcast(team_list_message(self.teams.snapshot()))

    async def _broadcast_ranking(self) -> None:
        await self.broadcaster.broadcast(ranking_message(self.round.ranking_snapshot()))
