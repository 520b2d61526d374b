"""Tests for QuizContext operations and their broadcasts."""

import asyncio
import time

import pytest

from quiz_buzzer.models.round import RejectReason, RoundPhase
from quiz_buzzer.services.quiz_context import QuizContext

pytestmark = pytest.mark.anyio


class MockWebSocket:
    """Records everything sent to it.

    ``delays`` holds per-send sleep times consumed in order; once exhausted,
    sends are immediate.
    """

    def __init__(self, fail: bool = False, delays: list[float] | None = None):
        self.sent_messages: list[dict] = []
        self.fail = fail
        self.delays = list(delays or [])
        self.closed = False
        self.close_code = None

    async def send_json(self, data: dict):
        if self.delays:
            await asyncio.sleep(self.delays.pop(0))
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent_messages.append(data)

    async def close(self, code: int = 1000):
        self.closed = True
        self.close_code = code

    def types(self) -> list[str]:
        return [m["type"] for m in self.sent_messages]

    def last(self, msg_type: str) -> dict | None:
        for msg in reversed(self.sent_messages):
            if msg["type"] == msg_type:
                return msg
        return None


@pytest.fixture
def quiz():
    return QuizContext()


def connect(quiz: QuizContext, **kwargs):
    ws = MockWebSocket(**kwargs)
    return quiz.connect(ws), ws


class TestBroadcasts:
    """Each mutation sends full snapshots to every connection."""

    async def test_add_team_broadcasts_team_list(self, quiz):
        _, ws1 = connect(quiz)
        _, ws2 = connect(quiz)

        team = await quiz.add_team("A", "red")

        for ws in (ws1, ws2):
            assert ws.types() == ["teamListUpdate"]
            assert ws.last("teamListUpdate")["teams"] == {
                team.id: {"id": team.id, "name": "A", "color": "red"}
            }

    async def test_start_round_broadcasts_started_and_empty_ranking(self, quiz):
        _, ws = connect(quiz)

        await quiz.start_round()

        assert ws.sent_messages == [
            {"type": "questionStarted"},
            {"type": "buzzerResult", "ranked": []},
        ]

    async def test_reset_round_broadcasts_reset_and_empty_ranking(self, quiz):
        _, ws = connect(quiz)

        await quiz.reset_round()

        assert ws.sent_messages == [
            {"type": "questionReset"},
            {"type": "buzzerResult", "ranked": []},
        ]

    async def test_remove_all_teams_resets_round(self, quiz):
        team = await quiz.add_team("A")
        await quiz.start_round()
        await quiz.submit_buzz(team.id)
        _, ws = connect(quiz)

        await quiz.remove_all_teams()

        assert len(quiz.teams) == 0
        assert quiz.round.phase == RoundPhase.IDLE
        assert quiz.round.ranking() == []
        assert ws.sent_messages == [
            {"type": "teamListUpdate", "teams": {}},
            {"type": "questionReset"},
            {"type": "buzzerResult", "ranked": []},
        ]

    async def test_only_accepted_buzz_broadcasts(self, quiz):
        team = await quiz.add_team("A")
        _, ws = connect(quiz)

        idle = await quiz.submit_buzz(team.id)
        assert idle.reason == RejectReason.ROUND_NOT_ACTIVE
        assert ws.sent_messages == []

        await quiz.start_round()
        ws.sent_messages.clear()
        await quiz.submit_buzz(team.id)
        await quiz.submit_buzz(team.id)

        assert ws.types() == ["buzzerResult"]
        assert ws.last("buzzerResult")["ranked"][0]["position"] == 1

    async def test_dead_connection_dropped(self, quiz):
        _, good = connect(quiz)
        dead_conn, dead = connect(quiz, fail=True)

        await quiz.start_round()

        assert quiz.sessions.get(dead_conn.id) is None
        assert dead.closed
        assert len(quiz.sessions) == 1
        assert good.types() == ["questionStarted", "buzzerResult"]


class TestSlowConnections:
    """Connections that miss a broadcast are closed, and others are not held up."""

    async def test_timed_out_connection_closed_and_can_rejoin(self):
        quiz = QuizContext(send_timeout=0.1)
        _, fast = connect(quiz)
        slow_conn, slow = connect(quiz, delays=[0.5])

        await quiz.start_round()

        assert slow.closed
        assert slow.close_code == 1011
        assert quiz.sessions.get(slow_conn.id) is None
        assert fast.types() == ["questionStarted", "buzzerResult"]

        # The client reconnects once its link recovers
        team = await quiz.add_team("A")
        rejoined = quiz.connect(slow)
        assert await quiz.register(rejoined.id, "team", team.id) is rejoined

        assert slow.types()[-3:] == ["teamListUpdate", "buzzerResult", "questionStarted"]
        assert slow.last("teamListUpdate")["teams"] == quiz.teams.snapshot()

    async def test_failed_register_snapshot_drops_connection(self, quiz):
        conn, ws = connect(quiz, fail=True)

        assert await quiz.register(conn.id, "guest") is None

        assert ws.closed
        assert quiz.sessions.get(conn.id) is None

    async def test_slow_connections_time_out_together(self):
        quiz = QuizContext(send_timeout=0.3)
        _, fast = connect(quiz)
        slow = [connect(quiz, delays=[1.0])[1] for _ in range(5)]

        started = time.monotonic()
        await quiz.start_round()
        elapsed = time.monotonic() - started

        assert elapsed < 1.0
        assert all(ws.closed for ws in slow)
        assert fast.types() == ["questionStarted", "buzzerResult"]
        assert len(quiz.sessions) == 1


class TestRegisterSnapshot:
    """Register pushes the current state to the registering connection only."""

    async def test_late_joiner_gets_current_ranking(self, quiz):
        a = await quiz.add_team("A", "red")
        await quiz.start_round()
        await quiz.submit_buzz(a.id)
        other, other_ws = connect(quiz)
        conn, ws = connect(quiz)

        await quiz.register(conn.id, "team", a.id)

        assert ws.types() == ["teamListUpdate", "buzzerResult", "questionStarted"]
        assert ws.last("buzzerResult")["ranked"] == [
            {"teamId": a.id, "teamName": "A", "color": "red", "position": 1}
        ]
        assert other_ws.sent_messages == []

    async def test_idle_snapshot_reports_reset(self, quiz):
        conn, ws = connect(quiz)

        await quiz.register(conn.id)

        assert ws.sent_messages[-1] == {"type": "questionReset"}


class TestConcurrentBuzzes:
    """Buzzes arriving together are ranked one at a time."""

    async def test_concurrent_buzzes_get_distinct_positions(self, quiz):
        teams = [await quiz.add_team(f"T{i}") for i in range(20)]
        await quiz.start_round()
        for _ in range(3):
            connect(quiz)

        results = await asyncio.gather(
            *(quiz.submit_buzz(t.id) for t in teams),
            *(quiz.submit_buzz(t.id) for t in teams),
        )

        accepted = [r for r in results if r.accepted]
        assert sorted(r.position for r in accepted) == list(range(1, 21))
        ranked_ids = [e.team_id for e in quiz.round.ranking()]
        assert len(set(ranked_ids)) == 20


class TestAdminToken:
    """Tests for admin token checks."""

    async def test_no_token_configured_is_dev_mode(self):
        quiz = QuizContext()
        assert quiz.is_admin_token(None)

    async def test_token_required_when_configured(self):
        quiz = QuizContext(admin_token="secret")

        assert quiz.is_admin_token("secret")
        assert not quiz.is_admin_token("wrong")
        assert not quiz.is_admin_token(None)

    async def test_connect_marks_authenticated(self):
        quiz = QuizContext(admin_token="secret")

        assert quiz.connect(MockWebSocket(), "secret").authenticated
        assert not quiz.connect(MockWebSocket()).authenticated


class TestSnapshot:
    async def test_snapshot_contents(self, quiz):
        team = await quiz.add_team("A")
        await quiz.start_round()
        await quiz.submit_buzz(team.id)

        snapshot = quiz.snapshot()

        assert snapshot["phase"] == "active"
        assert list(snapshot["teams"]) == [team.id]
        assert snapshot["ranked"][0]["teamId"] == team.id
        assert snapshot["connections"] == {"admin": 0, "team": 0, "guest": 0}
