"""WebSocket handler for admin, team and guest clients."""

import json
import logging
import traceback
from typing import Awaitable, Callable

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from quiz_buzzer.models.connection import Connection
from quiz_buzzer.models.events import (
    AddTeamEvent,
    BuzzerPressEvent,
    InboundEvent,
    RegisterEvent,
)
from quiz_buzzer.services.quiz_context import QuizContext

logger = logging.getLogger(__name__)

EventHandler = Callable[[QuizContext, Connection, dict], Awaitable[None]]


async def _on_register(quiz: QuizContext, connection: Connection, payload: dict) -> None:
    event = RegisterEvent.model_validate(payload)
    await quiz.register(connection.id, event.role or "guest", event.tid)


async def _on_add_team(quiz: QuizContext, connection: Connection, payload: dict) -> None:
    event = AddTeamEvent.model_validate(payload)
    await quiz.add_team(event.name, event.color)


async def _on_clear_all_teams(quiz: QuizContext, connection: Connection, payload: dict) -> None:
    logger.info(f"Clearing all teams (requested by socket): {connection.id}")
    await quiz.remove_all_teams()


async def _on_start_question(quiz: QuizContext, connection: Connection, payload: dict) -> None:
    await quiz.start_round()


async def _on_reset_question(quiz: QuizContext, connection: Connection, payload: dict) -> None:
    await quiz.reset_round()


async def _on_buzzer_press(quiz: QuizContext, connection: Connection, payload: dict) -> None:
    event = BuzzerPressEvent.model_validate(payload)
    await quiz.submit_buzz(event.tid)


EVENT_HANDLERS: dict[str, EventHandler] = {
    "register": _on_register,
    "addTeam": _on_add_team,
    "clearAllTeams": _on_clear_all_teams,
    "startQuestion": _on_start_question,
    "resetQuestion": _on_reset_question,
    "buzzerPress": _on_buzzer_press,
}

# Events that mutate teams or rounds; only registered admins may send them
ADMIN_EVENTS = frozenset({"addTeam", "clearAllTeams", "startQuestion", "resetQuestion"})


async def handle_event(quiz: QuizContext, connection: Connection, raw: str) -> None:
    """Parse and dispatch one inbound message.

    Anything invalid is dropped with a log line; the client gets no reply.
    """
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Invalid JSON from {connection.id}: {raw[:200]}")
        return

    if not isinstance(msg, dict):
        logger.warning(f"Non-object message from {connection.id} ignored")
        return

    try:
        envelope = InboundEvent.model_validate(msg)
    except ValidationError:
        logger.warning(f"Message without type from {connection.id} ignored")
        return

    handler = EVENT_HANDLERS.get(envelope.type)
    if handler is None:
        logger.debug(f"Unknown event {envelope.type!r} from {connection.id}")
        return

    if envelope.type in ADMIN_EVENTS and not connection.is_admin:
        logger.warning(
            f"Rejected {envelope.type} from {connection.id}: role is {connection.role.value}"
        )
        return

    payload = {k: v for k, v in msg.items() if k != "type"}
    try:
        await handler(quiz, connection, payload)
    except ValidationError as e:
        logger.info(f"Malformed {envelope.type} payload from {connection.id}: {e.error_count()} error(s)")


async def quiz_websocket(websocket: WebSocket, quiz: QuizContext) -> None:
    """Serve one client connection until it disconnects.

    Admin clients authenticate by connecting with ``?token=<admin token>``.
    """
    await websocket.accept()
    connection = quiz.connect(websocket, websocket.query_params.get("token"))

    try:
        while True:
            data = await websocket.receive_text()
            await handle_event(quiz, connection, data)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"Error on socket {connection.id}: {type(e).__name__}: {e}\n{traceback.format_exc()}")
        try:
            await websocket.close(code=1011)
        except Exception:
            pass
    finally:
        quiz.disconnect(connection.id)
