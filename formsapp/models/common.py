from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    errors: list[str] | None = None
    field_errors: dict[str, str] | None = None


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = []
    type_counts: dict[str, int] = {}
