"""Form-filling sessions. Abandoned sessions are dropped without persisting anything."""

import logging
import uuid

from formsapp.exceptions import AccessDeniedError, NotFoundError
from formsapp.models.answers import FillSessionInfo, FormReceipt
from formsapp.models.users import Session
from formsapp.services import persistence
from formsapp.services.answers import AnswerCollector

logger = logging.getLogger(__name__)

_sessions: dict[str, tuple[str, AnswerCollector]] = {}


def start_fill(template_id: str, session: Session) -> tuple[str, AnswerCollector]:
    template = persistence.load_template(template_id, session)
    fill_id = uuid.uuid4().hex
    collector = AnswerCollector(template)
    _sessions[fill_id] = (session.user_id, collector)
    return fill_id, collector


def get_fill(fill_id: str, session: Session) -> AnswerCollector:
    try:
        owner_id, collector = _sessions[fill_id]
    except KeyError:
        raise NotFoundError(f"Fill session {fill_id} not found") from None
    if owner_id != session.user_id:
        raise AccessDeniedError("This fill session belongs to another user.")
    return collector


def abandon_fill(fill_id: str, session: Session) -> None:
    get_fill(fill_id, session)
    del _sessions[fill_id]
    logger.info("Fill session %s abandoned", fill_id)


def submit_fill(fill_id: str, session: Session) -> FormReceipt:
    """Submit the collected answers. On failure the session keeps its answers for a retry."""
    collector = get_fill(fill_id, session)
    answers = collector.package()
    receipt = persistence.submit_answers(collector.template.id, answers, session)
    del _sessions[fill_id]
    return receipt


def fill_info(fill_id: str, collector: AnswerCollector) -> FillSessionInfo:
    return FillSessionInfo(
        id=fill_id,
        template_id=collector.template.id,
        answers=collector.answers,
        field_errors=dict(collector.field_errors),
    )


def clear_fills() -> None:
    _sessions.clear()
