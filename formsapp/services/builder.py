import logging
import re
import time
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from formsapp.config import get_settings
from formsapp.exceptions import NotFoundError, QuestionLimitError, TemplateValidationError, ValidationError
from formsapp.models.common import ValidationResult
from formsapp.models.questions import AUXILIARY_FIELDS, COMMON_FIELDS, Question
from formsapp.models.templates import Template, Topic
from formsapp.models.views import RenderContext
from formsapp.question_types import (
    QUESTION_TYPE_LIMITS,
    QUESTION_TYPE_REGISTRY,
    get_entry,
    resolve_builder_config,
    type_tag,
)
from formsapp.services.dragdrop import DragController, DragState, array_move
from formsapp.services.questions import (
    can_add,
    change_type,
    create_default,
    foreign_fields,
    normalize_question,
    validate_limits,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_ERROR = "Please complete all required fields."
NO_QUESTIONS_ERROR = "You must add at least one question."
INCOMPLETE_QUESTION_ERROR = "Each question must have a title and question text."

_ID_PATTERN = re.compile(r"^q(\d+)$")


# --- Pure operations over an ordered question list ---


def _question_at(questions: list[Question], index: int) -> Question:
    if not 0 <= index < len(questions):
        raise NotFoundError(f"No question at position {index}")
    return questions[index]


def _replace(questions: list[Question], index: int, question: Question) -> list[Question]:
    return [question if i == index else q for i, q in enumerate(questions)]


def add_question(questions: list[Question], question_type: str, question_id: str | None = None) -> list[Question]:
    tag = type_tag(question_type)
    get_entry(tag)
    if not can_add(questions, tag):
        current = sum(1 for q in questions if q.type == tag)
        raise QuestionLimitError(
            f"Maximum {QUESTION_TYPE_LIMITS[tag]} questions allowed for type: {tag} (currently {current})"
        )
    question = create_default(tag)
    question.id = question_id
    return [*questions, question]


def remove_question(questions: list[Question], index: int) -> list[Question]:
    _question_at(questions, index)
    return [q for i, q in enumerate(questions) if i != index]


def update_question_field(questions: list[Question], index: int, field: str, value: Any) -> list[Question]:
    """Set one field of one question. Changing `type` resets the type-specific fields."""
    question = _question_at(questions, index)
    if field == "type":
        return _replace(questions, index, change_type(question, value))
    if field == "label":
        field = "title"
    if field in COMMON_FIELDS:
        try:
            updated = Question.model_validate({**question.model_dump(), field: value})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid value for {field}: {e.errors()[0]['msg']}") from e
        return _replace(questions, index, updated)
    if field in AUXILIARY_FIELDS:
        config = resolve_builder_config(question.type)
        if config is None:
            raise ValidationError(f"Field '{field}' does not apply to {question.type} questions")
        changes: dict[str, Any] = {}
        try:
            config.edit(question, field, value, changes.__setitem__)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        return _replace(questions, index, question.model_copy(update=changes))
    raise ValidationError(f"Unknown question field: {field}")


def _edit_options(
    questions: list[Question], q_index: int, edit: Callable[[list[str]], list[str]],
) -> list[Question]:
    question = _question_at(questions, q_index)
    if question.options is None:
        raise ValidationError(f"{question.type} questions have no options")
    options = edit(list(question.options))
    return _replace(questions, q_index, question.model_copy(update={"options": options}))


def _check_option(options: list[str], opt_index: int) -> None:
    if not 0 <= opt_index < len(options):
        raise NotFoundError(f"No option at position {opt_index}")


def update_option(questions: list[Question], q_index: int, opt_index: int, value: str) -> list[Question]:
    def edit(options):
        _check_option(options, opt_index)
        options[opt_index] = value
        return options

    return _edit_options(questions, q_index, edit)


def add_option(questions: list[Question], q_index: int, value: str = "") -> list[Question]:
    return _edit_options(questions, q_index, lambda options: [*options, value])


def remove_option(questions: list[Question], q_index: int, opt_index: int) -> list[Question]:
    def edit(options):
        _check_option(options, opt_index)
        if len(options) <= 1:
            raise ValidationError("A question must keep at least one option.")
        return [o for i, o in enumerate(options) if i != opt_index]

    return _edit_options(questions, q_index, edit)


def reorder(questions: list[Question], from_index: int, to_index: int) -> list[Question]:
    try:
        return array_move(questions, from_index, to_index)
    except IndexError as e:
        raise NotFoundError(str(e)) from e


def _topic_value(topic) -> str:
    return topic.value if isinstance(topic, Topic) else (topic or "")


def validate_template(title: str, description: str, topic, questions: list[Question]) -> ValidationResult:
    """Structural checks run before a template is saved.

    Categories are checked in order and the first failing one is reported;
    the shape and type-limit categories report every offending question or type.
    """
    topic = _topic_value(topic)
    if not all((value or "").strip() for value in (title, description, topic)):
        return ValidationResult(is_valid=False, errors=[REQUIRED_FIELDS_ERROR])
    if topic not in {t.value for t in Topic}:
        return ValidationResult(
            is_valid=False,
            errors=[f"Topic must be one of: {', '.join(t.value for t in Topic)}."],
        )
    if not questions:
        return ValidationResult(is_valid=False, errors=[NO_QUESTIONS_ERROR])
    incomplete = [
        i for i, q in enumerate(questions)
        if not q.title.strip() or not q.question_text.strip()
    ]
    if incomplete:
        for i in incomplete:
            logger.warning("Incomplete question #%d: %s", i + 1, questions[i].id)
        return ValidationResult(is_valid=False, errors=[INCOMPLETE_QUESTION_ERROR])
    shape_errors = _shape_errors(questions)
    if shape_errors:
        return ValidationResult(is_valid=False, errors=shape_errors)
    return validate_limits(questions)


def _shape_errors(questions: list[Question]) -> list[str]:
    errors = []
    for q in questions:
        if q.type not in QUESTION_TYPE_REGISTRY:
            errors.append(f"Unsupported question type: {q.type}")
            continue
        stray = foreign_fields(q)
        if stray:
            errors.append(f"Question {q.id} has fields that do not apply to {q.type} questions: {', '.join(stray)}")
    return errors


# --- Editing session ---


class TemplateBuilder:
    """In-memory editing session over one template.

    Owns the template metadata, the ordered questions and the id counter.
    Nothing is persisted until the caller saves the result of `submit()`.
    """

    METADATA_FIELDS = ("title", "description", "topic", "image_url", "tags", "is_public", "allowed_users")

    def __init__(
        self,
        template: Template | None = None,
        author_id: str | None = None,
        flash_duration: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.template_id = template.id if template else None
        self.author_id = template.author_id if template else author_id
        self.created_at = template.created_at if template else None
        self.title = template.title if template else ""
        self.description = template.description if template else ""
        self.topic = _topic_value(template.topic) if template else ""
        self.image_url = template.image_url if template else None
        self.tags: list[str] = list(template.tags) if template else []
        self.is_public = template.is_public if template else True
        self.allowed_users: list[str] = list(template.allowed_users) if template else []
        self.questions: list[Question] = []
        self._next_id = 1
        if template:
            self.replace_questions(template.questions, strict=False)

        if flash_duration is None:
            flash_duration = get_settings().flash_duration
        self.drag = DragController(
            get_items=lambda: [q.id for q in self.questions],
            on_commit=self.reorder,
            flash_duration=flash_duration,
            clock=clock,
        )

    def _new_id(self) -> str:
        question_id = f"q{self._next_id}"
        self._next_id += 1
        return question_id

    def replace_questions(self, questions: list[Question], strict: bool = True) -> None:
        """Load a whole question list, giving ids to questions that have none.

        Auxiliary fields foreign to a question's type are dropped and missing ones
        take the type's defaults. Unknown types raise UnsupportedQuestionTypeError
        unless `strict` is off, which is how stored templates with legacy tags
        are reopened.
        """
        loaded = [
            normalize_question(q) if strict or q.type in QUESTION_TYPE_REGISTRY else q.model_copy(deep=True)
            for q in questions
        ]
        for q in loaded:
            match = _ID_PATTERN.match(q.id or "")
            if match:
                self._next_id = max(self._next_id, int(match.group(1)) + 1)
        seen = set()
        for q in loaded:
            if q.id is None or q.id in seen:
                q.id = self._new_id()
            seen.add(q.id)
        self.questions = loaded

    def add_question(self, question_type: str) -> Question:
        self.questions = add_question(self.questions, question_type, self._new_id())
        return self.questions[-1]

    def remove_question(self, index: int) -> Question:
        removed = _question_at(self.questions, index)
        self.questions = remove_question(self.questions, index)
        return removed

    def update_question_field(self, index: int, field: str, value: Any) -> Question:
        self.questions = update_question_field(self.questions, index, field, value)
        return self.questions[index]

    def update_option(self, q_index: int, opt_index: int, value: str) -> Question:
        self.questions = update_option(self.questions, q_index, opt_index, value)
        return self.questions[q_index]

    def add_option(self, q_index: int, value: str = "") -> Question:
        self.questions = add_option(self.questions, q_index, value)
        return self.questions[q_index]

    def remove_option(self, q_index: int, opt_index: int) -> Question:
        self.questions = remove_option(self.questions, q_index, opt_index)
        return self.questions[q_index]

    def reorder(self, from_index: int, to_index: int) -> None:
        self.questions = reorder(self.questions, from_index, to_index)

    def move(self, item_id: str, over_id: str) -> int | None:
        """Drag one question and release it over another in a single gesture."""
        ids = [q.id for q in self.questions]
        if over_id not in ids:
            raise NotFoundError(f"No question with id {over_id}")
        centers = {qid: (0.0, float(i)) for i, qid in enumerate(ids)}
        self.drag.pointer_down(item_id, centers)
        self.drag.pointer_move(centers[over_id])
        return self.drag.pointer_up()

    def update_metadata(self, **changes) -> None:
        for field, value in changes.items():
            if field not in self.METADATA_FIELDS:
                raise ValidationError(f"Unknown template field: {field}")
            if field == "tags":
                value = list(dict.fromkeys(t.strip() for t in value if t and t.strip()))
            if field == "topic":
                value = _topic_value(value)
            setattr(self, field, value)

    def render_context(self, **overrides) -> RenderContext:
        dragging = self.drag.active_id if self.drag.state == DragState.DRAGGING else None
        return RenderContext(dragging_id=dragging, flash_index=self.drag.flash_index, **overrides)

    def validate(self) -> ValidationResult:
        return validate_template(self.title, self.description, self.topic, self.questions)

    def submit(self) -> Template:
        result = self.validate()
        if not result.is_valid:
            logger.info("Template %r rejected: %s", self.title, result.errors)
            raise TemplateValidationError(result.errors)
        return Template(
            id=self.template_id,
            title=self.title.strip(),
            description=self.description,
            topic=Topic(self.topic),
            image_url=self.image_url,
            tags=list(self.tags),
            is_public=self.is_public,
            allowed_users=list(self.allowed_users),
            author_id=self.author_id,
            questions=[q.model_copy(deep=True) for q in self.questions],
            created_at=self.created_at,
        )
