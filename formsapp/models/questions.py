from enum import Enum

from pydantic import BaseModel, model_validator


class QuestionType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SELECT = "select"
    LINEAR = "linear"
    RATING = "rating"
    GRID_RADIO = "grid_radio"
    GRID_CHECKBOX = "grid_checkbox"
    FILE = "file"
    DATE = "date"
    TIME = "time"


CHOICE_TYPES = frozenset({"radio", "checkbox", "select"})

# Fields every question carries regardless of type.
COMMON_FIELDS = ("title", "question_text", "description", "required", "show_in_table")

# Fields whose meaning depends on the question type.
AUXILIARY_FIELDS = ("options", "rows", "columns", "min", "max", "accept", "multiple")


class Question(BaseModel):
    id: str | None = None
    # Kept as a plain string so stored questions with legacy tags still load
    # and render with an "unsupported type" warning.
    type: str
    title: str = ""
    question_text: str = ""
    description: str | None = None
    required: bool = False
    show_in_table: bool = True
    options: list[str] | None = None
    rows: list[str] | None = None
    columns: list[str] | None = None
    min: int | None = None
    max: int | None = None
    accept: str | None = None
    multiple: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def _absorb_label(cls, data):
        """Older payloads send the display text as `label`."""
        if isinstance(data, dict) and "label" in data:
            data = dict(data)
            label = data.pop("label")
            if not data.get("title"):
                data["title"] = label or ""
        return data

    @property
    def label(self) -> str:
        return self.title


class AddQuestionRequest(BaseModel):
    type: str


class UpdateQuestionFieldRequest(BaseModel):
    field: str
    value: str | int | bool | list[str] | None = None


class OptionRequest(BaseModel):
    value: str = ""


class ReorderRequest(BaseModel):
    from_index: int
    to_index: int


class MoveRequest(BaseModel):
    item_id: str
    over_id: str


class QuestionTypeInfo(BaseModel):
    type: str
    label: str
    icon: str
    description: str
    limit: int | None = None
    current: int = 0
    can_add: bool = True
