from collections import Counter

from formsapp.models.common import ValidationResult
from formsapp.models.questions import AUXILIARY_FIELDS, COMMON_FIELDS, Question, QuestionTypeInfo
from formsapp.question_types import QUESTION_TYPE_LIMITS, QUESTION_TYPE_REGISTRY, get_entry, type_tag


def _type_defaults(question_type: str) -> dict:
    config = get_entry(question_type).config
    return config.defaults() if config else {}


def create_default(question_type: str) -> Question:
    """A blank question of the given type with that type's auxiliary defaults."""
    tag = type_tag(question_type)
    return Question(
        type=tag,
        title="",
        question_text="",
        required=False,
        show_in_table=True,
        **_type_defaults(tag),
    )


def change_type(question: Question, new_type: str) -> Question:
    """Switch a question's type, keeping its id and display fields.

    Auxiliary fields of the old type are dropped; the new type starts from its
    own defaults.
    """
    tag = type_tag(new_type)
    if tag == question.type:
        return question.model_copy(deep=True)
    kept = question.model_dump(include={"id", *COMMON_FIELDS})
    return Question(type=tag, **kept, **_type_defaults(tag))


def _owned_fields(question_type: str) -> set[str]:
    config = get_entry(question_type).config
    if config is None:
        return set()
    return set(config.defaults()) | set(config.fields)


def foreign_fields(question: Question) -> list[str]:
    """Auxiliary fields set on a question although its type has no use for them."""
    owned = _owned_fields(question.type)
    return [f for f in AUXILIARY_FIELDS if f not in owned and getattr(question, f) is not None]


def normalize_question(question: Question) -> Question:
    """Clear auxiliary fields foreign to the question's type and fill in missing ones.

    Raises UnsupportedQuestionTypeError for tags the registry does not know.
    """
    config = get_entry(question.type).config
    defaults = config.defaults() if config else {}
    owned = _owned_fields(question.type)
    changes = {field: None for field in AUXILIARY_FIELDS if field not in owned}
    for field in owned:
        if getattr(question, field) is None:
            changes[field] = defaults.get(field)
    return question.model_copy(update=changes, deep=True)


def count_types(questions: list[Question]) -> dict[str, int]:
    return dict(Counter(q.type for q in questions))


def validate_limits(questions: list[Question]) -> ValidationResult:
    """Check every limited type against its cap, reporting all violations."""
    counts = count_types(questions)
    errors = [
        f"Maximum {limit} questions allowed for type: {question_type} (currently {counts[question_type]})"
        for question_type, limit in QUESTION_TYPE_LIMITS.items()
        if counts.get(question_type, 0) > limit
    ]
    return ValidationResult(is_valid=not errors, errors=errors, type_counts=counts)


def can_add(questions: list[Question], question_type: str) -> bool:
    limit = QUESTION_TYPE_LIMITS.get(type_tag(question_type))
    if limit is None:
        return True
    return sum(1 for q in questions if q.type == type_tag(question_type)) < limit


def list_type_infos(questions: list[Question] | None = None) -> list[QuestionTypeInfo]:
    """Registry metadata with current counts, used to enable or disable add choices."""
    counts = count_types(questions or [])
    return [
        QuestionTypeInfo(
            type=entry.type,
            label=entry.label,
            icon=entry.icon,
            description=entry.description,
            limit=entry.limit,
            current=counts.get(entry.type, 0),
            can_add=can_add(questions or [], entry.type),
        )
        for entry in QUESTION_TYPE_REGISTRY.values()
    ]
