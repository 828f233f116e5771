import logging
from typing import Any

from formsapp.exceptions import AnswerValidationError, NotFoundError, UnsupportedQuestionTypeError, ValidationError
from formsapp.models.questions import Question
from formsapp.models.templates import Template
from formsapp.models.views import RenderContext
from formsapp.question_types import resolve_input_renderer

logger = logging.getLogger(__name__)


def _blank(value) -> bool:
    return value is None or value == ""


def _row_cell(answer: dict, row_index: int):
    if str(row_index) in answer:
        return answer[str(row_index)]
    return answer.get(row_index)


def validate_required(question: Question, answer: Any) -> str | None:
    """Message for a required question left unanswered, or None.

    Only answered-ness is checked here; the shape of the value is the render
    strategy's responsibility. Zero is a valid linear/rating answer.
    """
    question_type = question.type
    if question_type in ("text", "textarea", "date", "time"):
        if not isinstance(answer, str) or not answer.strip():
            return "This field is required."
    elif question_type in ("radio", "select"):
        if _blank(answer):
            return "Select an option."
    elif question_type == "checkbox":
        if not isinstance(answer, (list, tuple, set, frozenset)) or len(answer) == 0:
            return "Select at least one option."
    elif question_type in ("linear", "rating"):
        if _blank(answer):
            return "Select a value."
    elif question_type == "grid_radio":
        rows = question.rows or []
        if not isinstance(answer, dict) or any(_blank(_row_cell(answer, i)) for i in range(len(rows))):
            return "Answer all rows."
    elif question_type == "grid_checkbox":
        rows = question.rows or []
        if not isinstance(answer, dict) or any(
            not isinstance(_row_cell(answer, i), list) or not _row_cell(answer, i)
            for i in range(len(rows))
        ):
            return "Select at least one option per row."
    elif question_type == "file":
        if _blank(answer) or (isinstance(answer, list) and not answer):
            return "Attach a file."
    return None


def validate_all(template: Template, answers: dict[str, Any]) -> dict[str, str]:
    """Errors keyed by question id for every required question left unanswered."""
    errors = {}
    for question in template.questions:
        if not question.required:
            continue
        message = validate_required(question, answers.get(question.id))
        if message:
            errors[question.id] = message
    return errors


def check_answer_keys(template: Template, answers: dict[str, Any]) -> None:
    known = {q.id for q in template.questions}
    unknown = sorted(set(answers) - known)
    if unknown:
        raise ValidationError([f"Unknown question id: {qid}" for qid in unknown])


class AnswerCollector:
    """The answer set of one form-filling session."""

    def __init__(self, template: Template):
        self.template = template
        self._questions = {q.id: q for q in template.questions}
        self._answers: dict[str, Any] = {}
        self.field_errors: dict[str, str] = {}

    @property
    def answers(self) -> dict[str, Any]:
        return dict(self._answers)

    def question(self, question_id: str) -> Question:
        try:
            return self._questions[question_id]
        except KeyError:
            raise NotFoundError(f"No question with id {question_id} in template {self.template.id}") from None

    def set_answer(self, question_id: str, value: Any) -> None:
        self.question(question_id)
        self._answers[question_id] = value
        self.field_errors.pop(question_id, None)

    def handle_input(self, question_id: str, event: Any) -> Any:
        """Apply one control interaction through the question's render strategy."""
        question = self.question(question_id)
        try:
            renderer = resolve_input_renderer(question.type)
            renderer.handle_input(question, self._answers.get(question_id), event, self.set_answer)
        except (UnsupportedQuestionTypeError, ValueError) as e:
            raise ValidationError(str(e)) from e
        return self._answers.get(question_id)

    def validate(self) -> dict[str, str]:
        self.field_errors = validate_all(self.template, self._answers)
        return dict(self.field_errors)

    def render_context(self, disabled: bool = False) -> RenderContext:
        return RenderContext(answers=self.answers, errors=dict(self.field_errors), disabled=disabled)

    def package(self) -> dict[str, Any]:
        """Answers ready for submission; raises when required questions are unanswered."""
        errors = self.validate()
        if errors:
            logger.info("Submission for template %s blocked: %d field errors", self.template.id, len(errors))
            raise AnswerValidationError(errors)
        return self.answers
