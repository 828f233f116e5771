import logging
from datetime import datetime, timezone
from typing import Any

from formsapp.exceptions import AccessDeniedError, AnswerValidationError, NotFoundError, TemplateValidationError
from formsapp.models.answers import FormInfo, FormReceipt
from formsapp.models.templates import Template
from formsapp.models.users import Session
from formsapp.services.answers import check_answer_keys, validate_all
from formsapp.services.builder import validate_template
from formsapp.services.lookup import create_tag
from formsapp.store import _get_store

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def user_has_access(template: Template, session: Session) -> bool:
    """Admins, the author, anyone for public templates, and listed users otherwise."""
    if session.is_admin or template.is_public:
        return True
    if template.author_id == session.user_id:
        return True
    return session.user_id in template.allowed_users


def can_edit(template: Template, session: Session) -> bool:
    return session.is_admin or template.author_id == session.user_id


def _matches(template: Template, query: str) -> bool:
    needle = query.lower()
    return (
        needle in template.title.lower()
        or needle in template.description.lower()
        or any(needle in tag.lower() for tag in template.tags)
    )


def list_templates(session: Session, query: str | None = None) -> list[Template]:
    """Templates the caller may see, newest first, optionally filtered by a search term."""
    templates = [Template.model_validate(record) for record in _get_store().list("templates")]
    visible = [t for t in templates if user_has_access(t, session)]
    if query:
        visible = [t for t in visible if _matches(t, query)]
    return sorted(visible, key=lambda t: t.updated_at or "", reverse=True)


def load_template(template_id: str, session: Session) -> Template:
    record = _get_store().get("templates", template_id)
    if record is None:
        raise NotFoundError(f"Template {template_id} not found")
    template = Template.model_validate(record)
    if not user_has_access(template, session):
        raise AccessDeniedError("You do not have access to this template.")
    return template


def save_template(template: Template, session: Session) -> Template:
    """Create or update a template after the structural checks pass."""
    result = validate_template(template.title, template.description, template.topic, template.questions)
    if not result.is_valid:
        raise TemplateValidationError(result.errors)

    store = _get_store()
    now = _now()
    if template.id is not None:
        existing = store.get("templates", template.id)
        if existing is None:
            raise NotFoundError(f"Template {template.id} not found")
        current = Template.model_validate(existing)
        if not can_edit(current, session):
            raise AccessDeniedError("Only the author can modify this template.")
        saved = template.model_copy(update={
            "author_id": current.author_id,
            "created_at": current.created_at,
            "updated_at": now,
        })
    else:
        saved = template.model_copy(update={
            "id": store.next_id("templates"),
            "author_id": session.user_id,
            "created_at": now,
            "updated_at": now,
        })

    saved.tags = [create_tag(tag) for tag in saved.tags]
    store.save("templates", saved.id, saved.model_dump(mode="json"))
    logger.info("Saved template %s (%d questions) for user %s", saved.id, len(saved.questions), session.user_id)
    return saved


def delete_template(template_id: str, session: Session) -> None:
    store = _get_store()
    record = store.get("templates", template_id)
    if record is None:
        raise NotFoundError(f"Template {template_id} not found")
    if not can_edit(Template.model_validate(record), session):
        raise AccessDeniedError("Only the author can delete this template.")
    store.delete("templates", template_id)
    for collection in ("comments", "likes", "favorites"):
        store.delete_where(collection, template_id=template_id)
    logger.info("Deleted template %s", template_id)


def submit_answers(template_id: str, answers: dict[str, Any], session: Session) -> FormReceipt:
    """Validate an answer set against its template and store it as a filled form."""
    template = load_template(template_id, session)
    check_answer_keys(template, answers)
    errors = validate_all(template, answers)
    if errors:
        raise AnswerValidationError(errors)

    store = _get_store()
    form = FormInfo(
        id=store.next_id("forms"),
        template_id=template_id,
        user_id=session.user_id,
        answers=answers,
        created_at=_now(),
    )
    store.save("forms", form.id, form.model_dump(mode="json"))
    logger.info("Stored form %s for template %s", form.id, template_id)
    return FormReceipt(id=form.id, template_id=form.template_id, user_id=form.user_id, created_at=form.created_at)


def list_forms(session: Session) -> list[FormInfo]:
    forms = [FormInfo.model_validate(record) for record in _get_store().list("forms")]
    return [f for f in forms if f.user_id == session.user_id]


def list_template_forms(template_id: str, session: Session) -> list[FormInfo]:
    template = load_template(template_id, session)
    if not can_edit(template, session):
        raise AccessDeniedError("Only the author can see the answers to this template.")
    forms = [FormInfo.model_validate(record) for record in _get_store().list("forms")]
    return [f for f in forms if f.template_id == template_id]


def get_form(form_id: str, session: Session) -> FormInfo:
    store = _get_store()
    record = store.get("forms", form_id)
    if record is None:
        raise NotFoundError(f"Form {form_id} not found")
    form = FormInfo.model_validate(record)
    if form.user_id != session.user_id and not session.is_admin:
        template_record = store.get("templates", form.template_id)
        if template_record is None or Template.model_validate(template_record).author_id != session.user_id:
            raise AccessDeniedError("You do not have access to this form.")
    return form
