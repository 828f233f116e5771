class AuthenticationError(Exception):
    """Raised when the bearer token is missing or unknown."""


class AccessDeniedError(Exception):
    """Raised when the session user may not read or change a resource."""


class NotFoundError(Exception):
    """Raised when a template, form or draft does not exist."""


class PersistenceError(Exception):
    """Raised when the store or the remote backend fails."""


class UnsupportedQuestionTypeError(Exception):
    """Raised when the registry has no entry for a question type."""

    def __init__(self, question_type: str):
        super().__init__(f"Unsupported question type: {question_type}")
        self.question_type = question_type


class ValidationError(Exception):
    """Raised when a template or an answer set breaks a structural rule."""

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        super().__init__("; ".join(errors))
        self.errors = errors


class TemplateValidationError(ValidationError):
    """Raised by the builder when a template cannot be submitted."""


class QuestionLimitError(ValidationError):
    """Raised when adding a question would exceed its type limit."""


class AnswerValidationError(ValidationError):
    """Raised when required questions are left unanswered."""

    def __init__(self, field_errors: dict[str, str]):
        super().__init__("Please answer all required fields.")
        self.field_errors = field_errors
