from typing import Any

from pydantic import BaseModel

# str: text, textarea, radio, select, date, time, single file
# int: linear, rating
# list[str]: checkbox, multiple files
# dict: grid answers keyed by row index
AnswerValue = str | int | list[str] | dict[str, str] | dict[str, list[str]] | None


class SubmitAnswersRequest(BaseModel):
    template_id: str
    answers: dict[str, AnswerValue] = {}


class FormReceipt(BaseModel):
    id: str
    template_id: str
    user_id: str
    created_at: str


class FormInfo(BaseModel):
    id: str
    template_id: str
    user_id: str
    answers: dict[str, AnswerValue]
    created_at: str


class FillInputRequest(BaseModel):
    question_id: str
    event: Any = None  # option, toggled value, {"row": i, "column": c}, star, file refs or text


class FillSessionInfo(BaseModel):
    id: str
    template_id: str
    answers: dict[str, AnswerValue]
    field_errors: dict[str, str] = {}


class AnswerCheckResponse(BaseModel):
    is_valid: bool
    field_errors: dict[str, str] = {}


class StartFillRequest(BaseModel):
    template_id: str


class SetAnswerRequest(BaseModel):
    value: AnswerValue = None
