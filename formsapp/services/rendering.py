import logging

from formsapp.exceptions import UnsupportedQuestionTypeError
from formsapp.models.questions import CHOICE_TYPES, Question
from formsapp.models.templates import Template
from formsapp.models.views import QuestionView, RenderContext, RenderMode, TemplateView
from formsapp.question_types import QUESTION_TYPE_REGISTRY, resolve_builder_config, resolve_input_renderer

logger = logging.getLogger(__name__)


def _unsupported(question: Question) -> str:
    logger.warning("No renderer for question %s of type %r", question.id, question.type)
    return f"Unsupported question type: {question.type}"


def _render_builder(question: Question, context: RenderContext, index: int | None) -> QuestionView:
    view = QuestionView(
        mode=RenderMode.BUILDER,
        index=index,
        question_id=question.id,
        type=question.type,
        title=question.title,
        question_text=question.question_text,
        description=question.description,
        required=question.required,
        editable=True,
        type_choices=list(QUESTION_TYPE_REGISTRY),
        actions=["delete"],
        is_dragging=question.id is not None and question.id == context.dragging_id,
        flash=index is not None and index == context.flash_index,
    )
    try:
        config = resolve_builder_config(question.type)
    except UnsupportedQuestionTypeError:
        view.warning = _unsupported(question)
        return view
    if config is not None:
        view.config = config.configure(question)
    return view


def _render_fill(question: Question, context: RenderContext, index: int | None) -> QuestionView:
    view = QuestionView(
        mode=RenderMode.FILL,
        index=index,
        question_id=question.id,
        type=question.type,
        title=question.title,
        question_text=question.question_text,
        description=question.description,
        required=question.required,
        error=context.errors.get(question.id),
    )
    try:
        renderer = resolve_input_renderer(question.type)
    except UnsupportedQuestionTypeError:
        view.warning = _unsupported(question)
        return view
    view.input = renderer.render(question, context.answers.get(question.id), context.disabled)
    return view


def _render_preview(question: Question, index: int | None) -> QuestionView:
    badges = [question.type]
    if question.show_in_table:
        badges.append("show_in_table")
    if question.required:
        badges.append("required")
    return QuestionView(
        mode=RenderMode.PREVIEW,
        index=index,
        question_id=question.id,
        type=question.type,
        title=question.title,
        question_text=question.question_text,
        description=question.description,
        required=question.required,
        badges=badges,
        options=list(question.options or []) if question.type in CHOICE_TYPES else [],
    )


def render(
    question: Question,
    mode: RenderMode | str,
    context: RenderContext | None = None,
    index: int | None = None,
) -> QuestionView:
    """Produce the view of one question for the builder, the fill page or a preview."""
    context = context or RenderContext()
    mode = RenderMode(mode)
    if mode == RenderMode.BUILDER:
        return _render_builder(question, context, index)
    if mode == RenderMode.FILL:
        return _render_fill(question, context, index)
    return _render_preview(question, index)


def render_questions(
    questions: list[Question], mode: RenderMode | str, context: RenderContext | None = None,
) -> list[QuestionView]:
    return [render(q, mode, context, index=i) for i, q in enumerate(questions)]


def render_template(
    template: Template, mode: RenderMode | str, context: RenderContext | None = None,
) -> TemplateView:
    return TemplateView(
        mode=RenderMode(mode),
        template_id=template.id,
        title=template.title,
        description=template.description,
        questions=render_questions(template.questions, mode, context),
    )
