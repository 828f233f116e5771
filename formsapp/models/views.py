from enum import Enum
from typing import Any

from pydantic import BaseModel


class RenderMode(str, Enum):
    BUILDER = "builder"
    FILL = "fill"
    PREVIEW = "preview"


class Choice(BaseModel):
    value: str | int
    label: str
    selected: bool = False


class GridRowView(BaseModel):
    index: int
    label: str
    choices: list[Choice]


class InputView(BaseModel):
    control: str  # text, textarea, radio, checkbox, select, scale, stars, grid_radio, grid_checkbox, file, date, time
    name: str
    value: Any = None
    choices: list[Choice] = []
    rows: list[GridRowView] = []
    accept: str | None = None
    multiple: bool = False
    required: bool = False
    disabled: bool = False


class EditorView(BaseModel):
    field: str
    kind: str  # list, number, text, toggle
    label: str
    value: Any = None
    min_value: int | None = None
    max_value: int | None = None
    can_add: bool = False
    can_remove: bool = False


class ConfigView(BaseModel):
    editors: list[EditorView] = []


class QuestionView(BaseModel):
    mode: RenderMode
    index: int | None = None
    question_id: str | None = None
    type: str
    title: str
    question_text: str = ""
    description: str | None = None
    required: bool = False
    editable: bool = False
    badges: list[str] = []
    options: list[str] = []
    input: InputView | None = None
    config: ConfigView | None = None
    type_choices: list[str] = []
    actions: list[str] = []
    error: str | None = None
    warning: str | None = None
    is_dragging: bool = False
    flash: bool = False


class RenderContext(BaseModel):
    answers: dict[str, Any] = {}
    errors: dict[str, str] = {}
    disabled: bool = False
    dragging_id: str | None = None
    flash_index: int | None = None


class TemplateView(BaseModel):
    mode: RenderMode
    template_id: str | None = None
    title: str
    description: str = ""
    questions: list[QuestionView]
