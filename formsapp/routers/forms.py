from fastapi import APIRouter, Depends

from formsapp.auth import get_session
from formsapp.models.answers import AnswerCheckResponse, FormInfo, FormReceipt, SubmitAnswersRequest
from formsapp.models.users import Session
from formsapp.services import answers as answers_service
from formsapp.services import persistence

router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.post("", status_code=201)
def submit_form(request: SubmitAnswersRequest, session: Session = Depends(get_session)) -> FormReceipt:
    return persistence.submit_answers(request.template_id, request.answers, session)


@router.post("/check")
def check_answers(request: SubmitAnswersRequest, session: Session = Depends(get_session)) -> AnswerCheckResponse:
    """Dry run of a submission: report unanswered required questions without storing anything."""
    template = persistence.load_template(request.template_id, session)
    answers_service.check_answer_keys(template, request.answers)
    errors = answers_service.validate_all(template, request.answers)
    return AnswerCheckResponse(is_valid=not errors, field_errors=errors)


@router.get("")
def list_forms(session: Session = Depends(get_session)) -> list[FormInfo]:
    return persistence.list_forms(session)


@router.get("/{form_id}")
def get_form(form_id: str, session: Session = Depends(get_session)) -> FormInfo:
    return persistence.get_form(form_id, session)
