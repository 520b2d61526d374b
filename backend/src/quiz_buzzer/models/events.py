"""Inbound WebSocket event payloads.

Clients send JSON objects with a ``type`` key and flat payload fields, e.g.
``{"type": "buzzerPress", "tid": "team_3f2a..."}``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InboundEvent(BaseModel):
    """Envelope shared by every inbound message."""

    model_config = ConfigDict(extra="allow")

    type: str


class RegisterEvent(BaseModel):
    """Connection declares its role (and team id for team clients)."""

    role: Optional[str] = None
    tid: Optional[str] = None


class AddTeamEvent(BaseModel):
    """Admin creates a team."""

    name: str = Field(min_length=1)
    color: Optional[str] = None


class BuzzerPressEvent(BaseModel):
    """Team presses its buzzer."""

    tid: str = Field(min_length=1)
