"""Team registry: the source of truth for which teams exist."""

import logging
import uuid

from quiz_buzzer.models.team import Team

logger = logging.getLogger(__name__)

DEFAULT_TEAM_COLOR = "#000"


def generate_team_id() -> str:
    return f"team_{uuid.uuid4().hex[:12]}"


class TeamRegistry:
    """In-memory mapping of team id to Team, kept in creation order."""

    def __init__(self, default_color: str = DEFAULT_TEAM_COLOR):
        self.default_color = default_color
        self._teams: dict[str, Team] = {}

    def add_team(self, name: str, color: str | None = None) -> Team:
        """Create a team with a fresh id. Names need not be unique."""
        team_id = generate_team_id()
        while team_id in self._teams:
            team_id = generate_team_id()

        team = Team(id=team_id, name=name, color=color or self.default_color)
        self._teams[team_id] = team
        logger.info(f"Team added: {team.name} ({team.id}, {team.color})")
        return team

    def get(self, team_id: str) -> Team | None:
        """Look up a team. Absence is not an error."""
        return self._teams.get(team_id)

    def clear(self) -> None:
        """Remove every team."""
        count = len(self._teams)
        self._teams.clear()
        logger.info(f"Cleared {count} team(s)")

    def snapshot(self) -> dict[str, dict]:
        """Full team mapping as sent to clients."""
        return {team_id: team.to_dict() for team_id, team in self._teams.items()}

    def __len__(self) -> int:
        return len(self._teams)

    def __contains__(self, team_id: object) -> bool:
        return team_id in self._teams
