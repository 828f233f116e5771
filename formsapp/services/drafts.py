"""Builder sessions kept in memory until the author saves or discards them."""

import logging
import uuid

from formsapp.exceptions import AccessDeniedError, NotFoundError
from formsapp.models.templates import DraftInfo, Template
from formsapp.models.users import Session
from formsapp.services import persistence
from formsapp.services.builder import TemplateBuilder

logger = logging.getLogger(__name__)

_drafts: dict[str, tuple[str, TemplateBuilder]] = {}


def create_draft(session: Session, template_id: str | None = None) -> tuple[str, TemplateBuilder]:
    template = None
    if template_id is not None:
        template = persistence.load_template(template_id, session)
        if not persistence.can_edit(template, session):
            raise AccessDeniedError("Only the author can edit this template.")
    draft_id = uuid.uuid4().hex
    builder = TemplateBuilder(template=template, author_id=session.user_id)
    _drafts[draft_id] = (session.user_id, builder)
    logger.info("Opened draft %s for user %s", draft_id, session.user_id)
    return draft_id, builder


def get_draft(draft_id: str, session: Session) -> TemplateBuilder:
    try:
        owner_id, builder = _drafts[draft_id]
    except KeyError:
        raise NotFoundError(f"Draft {draft_id} not found") from None
    if owner_id != session.user_id:
        raise AccessDeniedError("This draft belongs to another user.")
    return builder


def discard_draft(draft_id: str, session: Session) -> None:
    get_draft(draft_id, session)
    del _drafts[draft_id]


def save_draft(draft_id: str, session: Session) -> Template:
    """Submit the draft and persist it. The draft stays open, now bound to the saved id."""
    builder = get_draft(draft_id, session)
    saved = persistence.save_template(builder.submit(), session)
    builder.template_id = saved.id
    builder.created_at = saved.created_at
    return saved


def draft_info(draft_id: str, builder: TemplateBuilder) -> DraftInfo:
    return DraftInfo(
        id=draft_id,
        template_id=builder.template_id,
        title=builder.title,
        description=builder.description,
        topic=builder.topic,
        image_url=builder.image_url,
        tags=list(builder.tags),
        is_public=builder.is_public,
        allowed_users=list(builder.allowed_users),
        questions=builder.questions,
        flash_index=builder.drag.flash_index,
    )


def clear_drafts() -> None:
    _drafts.clear()
