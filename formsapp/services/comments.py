import logging
from datetime import datetime, timezone

from formsapp.exceptions import AccessDeniedError, NotFoundError, ValidationError
from formsapp.models.comments import Comment, LikeStatus
from formsapp.models.users import Session
from formsapp.services.persistence import load_template
from formsapp.store import _get_store

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _content(content: str) -> str:
    content = content.strip()
    if not content:
        raise ValidationError("Comment cannot be empty.")
    return content


def _pair_key(template_id: str, user_id: str) -> str:
    return f"{template_id}:{user_id}"


# --- Comments ---


def list_comments(template_id: str, session: Session) -> list[Comment]:
    """Comments on a template, oldest first."""
    load_template(template_id, session)
    comments = [
        Comment.model_validate(record)
        for record in _get_store().list("comments")
        if record["template_id"] == template_id
    ]
    return sorted(comments, key=lambda c: (c.created_at, int(c.id)))


def add_comment(template_id: str, content: str, session: Session) -> Comment:
    load_template(template_id, session)
    store = _get_store()
    comment = Comment(
        id=store.next_id("comments"),
        template_id=template_id,
        user_id=session.user_id,
        username=session.username,
        content=_content(content),
        created_at=_now(),
    )
    store.save("comments", comment.id, comment.model_dump(mode="json"))
    logger.info("User %s commented on template %s", session.user_id, template_id)
    return comment


def _get_comment(comment_id: str) -> Comment:
    record = _get_store().get("comments", comment_id)
    if record is None:
        raise NotFoundError(f"Comment {comment_id} not found")
    return Comment.model_validate(record)


def update_comment(comment_id: str, content: str, session: Session) -> Comment:
    """Only the comment's author may edit it."""
    comment = _get_comment(comment_id)
    if comment.user_id != session.user_id:
        raise AccessDeniedError("You do not have permission to edit this comment.")
    updated = comment.model_copy(update={"content": _content(content), "updated_at": _now()})
    _get_store().save("comments", comment_id, updated.model_dump(mode="json"))
    return updated


def delete_comment(comment_id: str, session: Session) -> None:
    """The comment's author or an admin may delete it."""
    comment = _get_comment(comment_id)
    if comment.user_id != session.user_id and not session.is_admin:
        raise AccessDeniedError("You do not have permission to delete this comment.")
    _get_store().delete("comments", comment_id)
    logger.info("Deleted comment %s on template %s", comment_id, comment.template_id)


# --- Likes ---


def like_status(template_id: str, session: Session) -> LikeStatus:
    load_template(template_id, session)
    likes = [r for r in _get_store().list("likes") if r["template_id"] == template_id]
    return LikeStatus(
        template_id=template_id,
        count=len(likes),
        liked=any(r["user_id"] == session.user_id for r in likes),
    )


def like(template_id: str, session: Session) -> LikeStatus:
    """Like a template. A user holds at most one like per template."""
    load_template(template_id, session)
    _get_store().save(
        "likes", _pair_key(template_id, session.user_id),
        {"template_id": template_id, "user_id": session.user_id},
    )
    return like_status(template_id, session)


def unlike(template_id: str, session: Session) -> LikeStatus:
    load_template(template_id, session)
    _get_store().delete("likes", _pair_key(template_id, session.user_id))
    return like_status(template_id, session)


def toggle_like(template_id: str, session: Session) -> LikeStatus:
    if like_status(template_id, session).liked:
        return unlike(template_id, session)
    return like(template_id, session)


# --- Favorites ---


def list_favorites(session: Session) -> list[str]:
    """Ids of the caller's favorite templates, in the order they were added."""
    return [
        r["template_id"] for r in _get_store().list("favorites")
        if r["user_id"] == session.user_id
    ]


def add_favorite(template_id: str, session: Session) -> list[str]:
    load_template(template_id, session)
    _get_store().save(
        "favorites", _pair_key(template_id, session.user_id),
        {"template_id": template_id, "user_id": session.user_id},
    )
    return list_favorites(session)


def remove_favorite(template_id: str, session: Session) -> list[str]:
    _get_store().delete("favorites", _pair_key(template_id, session.user_id))
    return list_favorites(session)
