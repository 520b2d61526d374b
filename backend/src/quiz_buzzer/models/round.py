"""Question round state and buzz ranking models."""

from dataclasses import dataclass, field
from enum import Enum


class RoundPhase(str, Enum):
    """Phase of the shared question round."""

    IDLE = "idle"  # No question open, buzzes are ignored
    ACTIVE = "active"  # Question open, buzzes are ranked


class RejectReason(str, Enum):
    """Why a buzz was not ranked."""

    UNKNOWN_TEAM = "unknown_team"
    ROUND_NOT_ACTIVE = "round_not_active"
    DUPLICATE_BUZZ = "duplicate_buzz"


@dataclass(frozen=True)
class BuzzEntry:
    """A ranked buzz.

    Name and color are copied from the team when the buzz is accepted, so the
    ranking is a historical record rather than a live view of the team.
    """

    team_id: str
    team_name: str
    color: str
    position: int  # 1-based

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys clients expect."""
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "color": self.color,
            "position": self.position,
        }


@dataclass
class RoundState:
    """The single question round. Entries are empty whenever phase is IDLE."""

    phase: RoundPhase = RoundPhase.IDLE
    entries: list[BuzzEntry] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.phase == RoundPhase.ACTIVE

    def has_entry_for(self, team_id: str) -> bool:
        return any(e.team_id == team_id for e in self.entries)


@dataclass(frozen=True)
class BuzzResult:
    """Outcome of a buzz submission."""

    accepted: bool
    position: int | None = None
    reason: RejectReason | None = None
    entry: BuzzEntry | None = None

    @classmethod
    def accept(cls, entry: BuzzEntry) -> "BuzzResult":
        return cls(accepted=True, position=entry.position, entry=entry)

    @classmethod
    def reject(cls, reason: RejectReason) -> "BuzzResult":
        return cls(accepted=False, reason=reason)
