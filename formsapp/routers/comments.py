from fastapi import APIRouter, Depends

from formsapp.auth import get_session
from formsapp.models.comments import Comment, CommentRequest, LikeStatus
from formsapp.models.users import Session
from formsapp.services import comments as comments_service

router = APIRouter(prefix="/api", tags=["comments"])


# --- Comments ---

@router.get("/templates/{template_id}/comments")
def list_comments(template_id: str, session: Session = Depends(get_session)) -> list[Comment]:
    return comments_service.list_comments(template_id, session)


@router.post("/templates/{template_id}/comments", status_code=201)
def add_comment(template_id: str, request: CommentRequest, session: Session = Depends(get_session)) -> Comment:
    return comments_service.add_comment(template_id, request.content, session)


@router.put("/comments/{comment_id}")
def update_comment(comment_id: str, request: CommentRequest, session: Session = Depends(get_session)) -> Comment:
    return comments_service.update_comment(comment_id, request.content, session)


@router.delete("/comments/{comment_id}", status_code=204)
def delete_comment(comment_id: str, session: Session = Depends(get_session)):
    comments_service.delete_comment(comment_id, session)


# --- Likes ---

@router.get("/templates/{template_id}/likes")
def like_status(template_id: str, session: Session = Depends(get_session)) -> LikeStatus:
    return comments_service.like_status(template_id, session)


@router.put("/templates/{template_id}/likes")
def like(template_id: str, session: Session = Depends(get_session)) -> LikeStatus:
    return comments_service.like(template_id, session)


@router.delete("/templates/{template_id}/likes")
def unlike(template_id: str, session: Session = Depends(get_session)) -> LikeStatus:
    return comments_service.unlike(template_id, session)


@router.post("/templates/{template_id}/likes/toggle")
def toggle_like(template_id: str, session: Session = Depends(get_session)) -> LikeStatus:
    return comments_service.toggle_like(template_id, session)


# --- Favorites ---

@router.get("/favorites")
def list_favorites(session: Session = Depends(get_session)) -> list[str]:
    return comments_service.list_favorites(session)


@router.put("/favorites/{template_id}")
def add_favorite(template_id: str, session: Session = Depends(get_session)) -> list[str]:
    return comments_service.add_favorite(template_id, session)


@router.delete("/favorites/{template_id}")
def remove_favorite(template_id: str, session: Session = Depends(get_session)) -> list[str]:
    return comments_service.remove_favorite(template_id, session)
