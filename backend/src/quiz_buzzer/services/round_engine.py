"""Question round state machine and buzz ranking."""

import logging

from quiz_buzzer.models.round import (
    BuzzEntry,
    BuzzResult,
    RejectReason,
    RoundPhase,
    RoundState,
)
from quiz_buzzer.services.team_registry import TeamRegistry

logger = logging.getLogger(__name__)


class RoundEngine:
    """Owns the single question round and its buzz ranking.

    The ranking key is the order in which buzzes are processed, not client
    timestamps. Callers must serialize calls (see QuizContext); a buzz is
    ranked in one synchronous step, so the first processed buzz of a round
    always gets position 1.
    """

    def __init__(self, teams: TeamRegistry):
        self.teams = teams
        self.state = RoundState()

    @property
    def phase(self) -> RoundPhase:
        return self.state.phase

    @property
    def is_active(self) -> bool:
        return self.state.is_active

    def start_round(self) -> None:
        """Open a fresh round, discarding any previous ranking."""
        self.state.phase = RoundPhase.ACTIVE
        self.state.entries.clear()
        logger.info("Question started")

    def reset_round(self) -> None:
        """Close the round and clear its ranking."""
        self.state.phase = RoundPhase.IDLE
        self.state.entries.clear()
        logger.info("Question reset")

    def submit_buzz(self, team_id: str) -> BuzzResult:
        """Rank a buzz, or reject it without touching state.

        Checks run in order: unknown team, round not active, duplicate buzz.
        """
        team = self.teams.get(team_id)
        if team is None:
            logger.warning(f"Unknown team pressed buzzer: {team_id}")
            return BuzzResult.reject(RejectReason.UNKNOWN_TEAM)

        if not self.state.is_active:
            logger.info(f"Buzzer pressed while idle (ignored): {team.name}")
            return BuzzResult.reject(RejectReason.ROUND_NOT_ACTIVE)

        if self.state.has_entry_for(team_id):
            logger.info(f"Duplicate buzzer from {team.name}")
            return BuzzResult.reject(RejectReason.DUPLICATE_BUZZ)

        entry = BuzzEntry(
            team_id=team.id,
            team_name=team.name,
            color=team.color,
            position=len(self.state.entries) + 1,
        )
        self.state.entries.append(entry)
        logger.info(f"Buzzer: {team.name} (#{entry.position})")
        return BuzzResult.accept(entry)

    def ranking(self) -> list[BuzzEntry]:
        """Current ranking, ordered by position."""
        return list(self.state.entries)

    def ranking_snapshot(self) -> list[dict]:
        return [entry.to_dict() for entry in self.state.entries]
