"""Quiz state services."""

from quiz_buzzer.services.broadcaster import Broadcaster
from quiz_buzzer.services.quiz_context import QuizContext
from quiz_buzzer.services.round_engine import RoundEngine
from quiz_buzzer.services.session_registry import SessionRegistry
from quiz_buzzer.services.team_registry import TeamRegistry

__all__ = [
    "Broadcaster",
    "QuizContext",
    "RoundEngine",
    "SessionRegistry",
    "TeamRegistry",
]
