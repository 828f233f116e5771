"""Question type registry.

Each question type maps to a render strategy (how the question is answered),
an optional config strategy (which type-specific fields the builder edits)
and its limit per template.
"""

from dataclasses import dataclass
from typing import Any, Callable

from formsapp.exceptions import UnsupportedQuestionTypeError
from formsapp.models.questions import Question, QuestionType
from formsapp.models.views import Choice, ConfigView, EditorView, GridRowView, InputView

SetAnswer = Callable[[str, Any], None]
OnFieldChange = Callable[[str, Any], None]

# At most this many questions of each type per template. Types missing here
# are unlimited. "integer" is a legacy tag still counted when present.
QUESTION_TYPE_LIMITS: dict[str, int] = {
    "text": 4,
    "textarea": 4,
    "integer": 4,
    "checkbox": 4,
}

SCALE_CEILING = 10


def _is_number(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _row_value(answer, row_index: int):
    """Grid answers arrive keyed by "0", "1", ... from JSON, or by int in-process."""
    if not isinstance(answer, dict):
        return None
    if str(row_index) in answer:
        return answer[str(row_index)]
    return answer.get(row_index)


# --- Render strategies ---


class RenderStrategy:
    """Turns a question plus its current answer into an input view."""

    control = "text"

    def render(self, question: Question, answer=None, disabled: bool = False) -> InputView:
        return InputView(
            control=self.control,
            name=f"{self.control}-{question.id}",
            value=answer if isinstance(answer, str) else "",
            required=question.required,
            disabled=disabled,
        )

    def next_answer(self, question: Question, answer, event):
        if not isinstance(event, str):
            raise ValueError(f"{question.type} answers must be text")
        return event

    def handle_input(self, question: Question, answer, event, set_answer: SetAnswer) -> None:
        set_answer(question.id, self.next_answer(question, answer, event))


class TextRenderer(RenderStrategy):
    control = "text"


class TextareaRenderer(RenderStrategy):
    control = "textarea"


class DateRenderer(RenderStrategy):
    control = "date"


class TimeRenderer(RenderStrategy):
    control = "time"


class SingleChoiceRenderer(RenderStrategy):
    """radio and select: one option out of the list."""

    def __init__(self, control: str):
        self.control = control

    def render(self, question, answer=None, disabled=False):
        choices = [
            Choice(value=opt, label=opt, selected=answer == opt)
            for opt in question.options or []
        ]
        return InputView(
            control=self.control,
            name=f"{self.control}-{question.id}",
            value=answer if isinstance(answer, str) else "",
            choices=choices,
            required=question.required,
            disabled=disabled,
        )

    def next_answer(self, question, answer, event):
        if event not in (question.options or []):
            raise ValueError(f"'{event}' is not an option of question {question.id}")
        return event


class CheckboxRenderer(RenderStrategy):
    control = "checkbox"

    def render(self, question, answer=None, disabled=False):
        picked = answer if isinstance(answer, list) else []
        choices = [
            Choice(value=opt, label=opt, selected=opt in picked)
            for opt in question.options or []
        ]
        return InputView(
            control=self.control,
            name=f"checkbox-{question.id}",
            value=list(picked),
            choices=choices,
            required=question.required,
            disabled=disabled,
        )

    def next_answer(self, question, answer, event):
        options = question.options or []
        if event not in options:
            raise ValueError(f"'{event}' is not an option of question {question.id}")
        picked = set(answer) if isinstance(answer, list) else set()
        picked ^= {event}
        return [opt for opt in options if opt in picked]


class ScaleRenderer(RenderStrategy):
    """linear scales and star ratings: one integer within [min, max]."""

    def __init__(self, control: str, default_min: int, default_max: int):
        self.control = control
        self.default_min = default_min
        self.default_max = default_max

    def bounds(self, question: Question) -> tuple[int, int]:
        low = question.min if question.min is not None else self.default_min
        high = question.max if question.max is not None else self.default_max
        return low, high

    def render(self, question, answer=None, disabled=False):
        low, high = self.bounds(question)
        choices = [
            Choice(value=n, label=str(n), selected=_is_number(answer) and answer == n)
            for n in range(low, high + 1)
        ]
        return InputView(
            control=self.control,
            name=f"{self.control}-{question.id}",
            value=answer if _is_number(answer) else None,
            choices=choices,
            required=question.required,
            disabled=disabled,
        )

    def next_answer(self, question, answer, event):
        low, high = self.bounds(question)
        if not _is_number(event) or not low <= event <= high:
            raise ValueError(f"{question.type} answers must be an integer between {low} and {high}")
        return event


class GridRadioRenderer(RenderStrategy):
    control = "grid_radio"

    def _selected(self, cell, column: str) -> bool:
        return cell == column

    def render(self, question, answer=None, disabled=False):
        columns = question.columns or []
        rows = [
            GridRowView(
                index=i,
                label=row,
                choices=[
                    Choice(value=col, label=col, selected=self._selected(_row_value(answer, i), col))
                    for col in columns
                ],
            )
            for i, row in enumerate(question.rows or [])
        ]
        return InputView(
            control=self.control,
            name=f"{self.control}-{question.id}",
            value=dict(answer) if isinstance(answer, dict) else {},
            rows=rows,
            required=question.required,
            disabled=disabled,
        )

    def _cell(self, question, event) -> tuple[int, str]:
        if not isinstance(event, dict):
            raise ValueError("grid answers are given as {'row': index, 'column': value}")
        row, column = event.get("row"), event.get("column")
        if not _is_number(row) or not 0 <= row < len(question.rows or []):
            raise ValueError(f"row {row!r} does not exist in question {question.id}")
        if column not in (question.columns or []):
            raise ValueError(f"'{column}' is not a column of question {question.id}")
        return row, column

    def next_answer(self, question, answer, event):
        row, column = self._cell(question, event)
        updated = {str(k): v for k, v in answer.items()} if isinstance(answer, dict) else {}
        updated[str(row)] = column
        return updated


class GridCheckboxRenderer(GridRadioRenderer):
    control = "grid_checkbox"

    def _selected(self, cell, column: str) -> bool:
        return isinstance(cell, list) and column in cell

    def next_answer(self, question, answer, event):
        row, column = self._cell(question, event)
        updated = {str(k): list(v) for k, v in answer.items()} if isinstance(answer, dict) else {}
        picked = set(updated.get(str(row), []))
        picked ^= {column}
        updated[str(row)] = [col for col in question.columns or [] if col in picked]
        return updated


class FileRenderer(RenderStrategy):
    control = "file"

    def render(self, question, answer=None, disabled=False):
        return InputView(
            control=self.control,
            name=f"file-{question.id}",
            value=answer,
            accept=question.accept or "",
            multiple=bool(question.multiple),
            required=question.required,
            disabled=disabled,
        )

    def next_answer(self, question, answer, event):
        refs = [event] if isinstance(event, str) else event
        if not isinstance(refs, list) or not all(isinstance(r, str) for r in refs):
            raise ValueError("file answers are file references")
        if question.multiple:
            return list(refs)
        return refs[0] if refs else None


# --- Config strategies ---


class ConfigStrategy:
    """Describes and applies the type-specific authoring controls."""

    fields: tuple[str, ...] = ()

    def defaults(self) -> dict:
        return {}

    def configure(self, question: Question) -> ConfigView:
        return ConfigView()

    def coerce(self, question: Question, field: str, value):
        return value

    def edit(self, question: Question, field: str, value, on_field_change: OnFieldChange) -> None:
        if field not in self.fields:
            raise ValueError(f"Field '{field}' does not apply to {question.type} questions")
        on_field_change(field, self.coerce(question, field, value))


def _string_list(field: str, value) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{field} must be a list of strings")
    if not value:
        raise ValueError(f"{field} must keep at least one entry")
    return list(value)


class OptionsConfig(ConfigStrategy):
    fields = ("options",)

    def defaults(self):
        return {"options": ["", ""]}

    def configure(self, question):
        options = question.options or []
        return ConfigView(editors=[
            EditorView(
                field="options", kind="list", label="Options", value=list(options),
                can_add=True, can_remove=len(options) > 1,
            ),
        ])

    def coerce(self, question, field, value):
        return _string_list(field, value)


class GridConfig(ConfigStrategy):
    fields = ("rows", "columns")

    def defaults(self):
        return {"rows": [""], "columns": [""]}

    def configure(self, question):
        rows, columns = question.rows or [], question.columns or []
        return ConfigView(editors=[
            EditorView(field="rows", kind="list", label="Rows", value=list(rows),
                       can_add=True, can_remove=len(rows) > 1),
            EditorView(field="columns", kind="list", label="Columns", value=list(columns),
                       can_add=True, can_remove=len(columns) > 1),
        ])

    def coerce(self, question, field, value):
        return _string_list(field, value)


class LinearScaleConfig(ConfigStrategy):
    fields = ("min", "max")

    def defaults(self):
        return {"min": 1, "max": 5}

    def configure(self, question):
        low = question.min if question.min is not None else 1
        high = question.max if question.max is not None else 5
        return ConfigView(editors=[
            EditorView(field="min", kind="number", label="Min", value=low, min_value=0, max_value=high - 1),
            EditorView(field="max", kind="number", label="Max", value=high, min_value=low + 1, max_value=SCALE_CEILING),
        ])

    def coerce(self, question, field, value):
        if not _is_number(value):
            raise ValueError(f"{field} must be an integer")
        low = question.min if question.min is not None else 1
        high = question.max if question.max is not None else 5
        if field == "min" and not 0 <= value < high:
            raise ValueError(f"min must be between 0 and {high - 1}")
        if field == "max" and not low < value <= SCALE_CEILING:
            raise ValueError(f"max must be between {low + 1} and {SCALE_CEILING}")
        return value


class RatingConfig(ConfigStrategy):
    fields = ("max",)

    def defaults(self):
        return {"min": 1, "max": 5}

    def configure(self, question):
        stars = question.max if question.max is not None else 5
        return ConfigView(editors=[
            EditorView(field="max", kind="number", label="Max stars", value=stars, min_value=1, max_value=SCALE_CEILING),
        ])

    def coerce(self, question, field, value):
        if not _is_number(value) or not 1 <= value <= SCALE_CEILING:
            raise ValueError(f"max must be an integer between 1 and {SCALE_CEILING}")
        return value


class FileConfig(ConfigStrategy):
    fields = ("accept", "multiple")

    def defaults(self):
        return {"accept": "", "multiple": False}

    def configure(self, question):
        return ConfigView(editors=[
            EditorView(field="accept", kind="text", label="Accepted files", value=question.accept or ""),
            EditorView(field="multiple", kind="toggle", label="Allow multiple files", value=bool(question.multiple)),
        ])

    def coerce(self, question, field, value):
        if field == "accept" and not isinstance(value, str):
            raise ValueError("accept must be a string such as 'image/*,.pdf'")
        if field == "multiple" and not isinstance(value, bool):
            raise ValueError("multiple must be true or false")
        return value


# --- Registry ---


@dataclass(frozen=True)
class QuestionTypeEntry:
    type: str
    label: str
    icon: str
    description: str
    renderer: RenderStrategy
    config: ConfigStrategy | None = None

    @property
    def limit(self) -> int | None:
        return QUESTION_TYPE_LIMITS.get(self.type)


_options_config = OptionsConfig()
_grid_config = GridConfig()

QUESTION_TYPE_REGISTRY: dict[str, QuestionTypeEntry] = {
    entry.type: entry
    for entry in (
        QuestionTypeEntry("text", "Short answer", "📝", "Short text input field", TextRenderer()),
        QuestionTypeEntry("textarea", "Paragraph", "📄", "Long text input area", TextareaRenderer()),
        QuestionTypeEntry("radio", "Multiple choice", "🔘", "Single choice selection",
                          SingleChoiceRenderer("radio"), _options_config),
        QuestionTypeEntry("checkbox", "Checkboxes", "☑️", "Multiple choice selection",
                          CheckboxRenderer(), _options_config),
        QuestionTypeEntry("select", "Dropdown", "📋", "Dropdown selection",
                          SingleChoiceRenderer("select"), _options_config),
        QuestionTypeEntry("file", "File upload", "📎", "File upload field", FileRenderer(), FileConfig()),
        QuestionTypeEntry("linear", "Linear scale", "📊", "Linear scale rating",
                          ScaleRenderer("scale", 1, 5), LinearScaleConfig()),
        QuestionTypeEntry("rating", "Rating", "⭐", "Star-based rating",
                          ScaleRenderer("stars", 1, 5), RatingConfig()),
        QuestionTypeEntry("grid_radio", "Multiple choice grid", "🎯", "Grid with radio buttons",
                          GridRadioRenderer(), _grid_config),
        QuestionTypeEntry("grid_checkbox", "Checkbox grid", "🔲", "Grid with checkboxes",
                          GridCheckboxRenderer(), _grid_config),
        QuestionTypeEntry("date", "Date", "📅", "Date picker", DateRenderer()),
        QuestionTypeEntry("time", "Time", "🕒", "Time picker", TimeRenderer()),
    )
}


def type_tag(question_type) -> str:
    """Plain string tag for a QuestionType member or a raw tag."""
    return question_type.value if isinstance(question_type, QuestionType) else question_type


def get_entry(question_type: str) -> QuestionTypeEntry:
    tag = type_tag(question_type)
    if not isinstance(tag, str) or tag not in QUESTION_TYPE_REGISTRY:
        raise UnsupportedQuestionTypeError(question_type)
    return QUESTION_TYPE_REGISTRY[tag]


def resolve_input_renderer(question_type: str) -> RenderStrategy:
    return get_entry(question_type).renderer


def resolve_builder_config(question_type: str) -> ConfigStrategy | None:
    return get_entry(question_type).config
