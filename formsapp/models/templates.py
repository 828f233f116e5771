from enum import Enum

from pydantic import BaseModel

from formsapp.models.questions import Question


class Topic(str, Enum):
    EDUCATION = "Education"
    QUIZ = "Quiz"
    OTHER = "Other"


class Template(BaseModel):
    id: str | None = None
    title: str
    description: str
    topic: Topic
    image_url: str | None = None
    tags: list[str] = []
    is_public: bool = True
    allowed_users: list[str] = []  # user ids, only consulted when not public
    author_id: str | None = None
    questions: list[Question] = []
    created_at: str | None = None
    updated_at: str | None = None


class CreateTemplateRequest(BaseModel):
    title: str
    description: str
    topic: str
    image_url: str | None = None
    tags: list[str] = []
    is_public: bool = True
    allowed_users: list[str] = []
    questions: list[Question] = []


class UpdateTemplateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    topic: str | None = None
    image_url: str | None = None
    tags: list[str] | None = None
    is_public: bool | None = None
    allowed_users: list[str] | None = None
    questions: list[Question] | None = None


class CreateDraftRequest(BaseModel):
    template_id: str | None = None  # start from a saved template instead of an empty one


class UpdateDraftRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    topic: str | None = None
    image_url: str | None = None
    tags: list[str] | None = None
    is_public: bool | None = None
    allowed_users: list[str] | None = None


class DraftInfo(BaseModel):
    id: str
    template_id: str | None = None
    title: str
    description: str
    topic: str
    image_url: str | None = None
    tags: list[str]
    is_public: bool
    allowed_users: list[str]
    questions: list[Question]
    flash_index: int | None = None
