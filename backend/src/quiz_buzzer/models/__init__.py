"""Data models for the quiz buzzer."""

from quiz_buzzer.models.connection import Connection, ConnectionRole
from quiz_buzzer.models.round import (
    BuzzEntry,
    BuzzResult,
    RejectReason,
    RoundPhase,
    RoundState,
)
from quiz_buzzer.models.team import Team

__all__ = [
    "BuzzEntry",
    "BuzzResult",
    "Connection",
    "ConnectionRole",
    "RejectReason",
    "RoundPhase",
    "RoundState",
    "Team",
]
