"""Read-only REST endpoints exposing the current quiz state."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(prefix="/api", tags=["state"])


class TeamInfo(BaseModel):
    """Team as shown to clients."""

    id: str
    name: str
    color: str


class RankedEntry(BaseModel):
    """One ranked buzz."""

    teamId: str
    teamName: str
    color: str
    position: int


class RankingResponse(BaseModel):
    """Current round ranking."""

    ranked: list[RankedEntry]


class StateResponse(BaseModel):
    """Full snapshot of teams, ranking, round phase and connections."""

    teams: dict[str, TeamInfo]
    ranked: list[RankedEntry]
    phase: str
    connections: dict[str, int]


@router.get("/state", response_model=StateResponse)
def get_state(request: Request):
    """Snapshot for clients that cannot hold a WebSocket open."""
    return request.app.state.quiz.snapshot()


@router.get("/teams", response_model=dict[str, TeamInfo])
def list_teams(request: Request):
    """Current team mapping keyed by team id."""
    return request.app.state.quiz.teams.snapshot()


@router.get("/ranking", response_model=RankingResponse)
def get_ranking(request: Request):
    """Ranking of the current round, ordered by position."""
    return {"ranked": request.app.state.quiz.round.ranking_snapshot()}
