from pydantic import BaseModel


class Comment(BaseModel):
    id: str
    template_id: str
    user_id: str
    username: str
    content: str
    created_at: str
    updated_at: str | None = None


class CommentRequest(BaseModel):
    content: str


class LikeStatus(BaseModel):
    template_id: str
    count: int
    liked: bool
