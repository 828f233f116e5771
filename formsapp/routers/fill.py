from fastapi import APIRouter, Depends

from formsapp.auth import get_session
from formsapp.models.answers import (
    FillInputRequest,
    FillSessionInfo,
    FormReceipt,
    SetAnswerRequest,
    StartFillRequest,
)
from formsapp.models.users import Session
from formsapp.models.views import QuestionView, RenderMode, TemplateView
from formsapp.services import fill as fill_service
from formsapp.services import rendering

router = APIRouter(prefix="/api/fill", tags=["fill"])


@router.post("", status_code=201)
def start_fill(request: StartFillRequest, session: Session = Depends(get_session)) -> FillSessionInfo:
    fill_id, collector = fill_service.start_fill(request.template_id, session)
    return fill_service.fill_info(fill_id, collector)


@router.get("/{fill_id}")
def get_fill(fill_id: str, session: Session = Depends(get_session)) -> FillSessionInfo:
    return fill_service.fill_info(fill_id, fill_service.get_fill(fill_id, session))


@router.get("/{fill_id}/view")
def view_fill(fill_id: str, disabled: bool = False, session: Session = Depends(get_session)) -> TemplateView:
    collector = fill_service.get_fill(fill_id, session)
    return rendering.render_template(collector.template, RenderMode.FILL, collector.render_context(disabled))


@router.put("/{fill_id}/answers/{question_id}")
def set_answer(
    fill_id: str, question_id: str, request: SetAnswerRequest, session: Session = Depends(get_session),
) -> FillSessionInfo:
    collector = fill_service.get_fill(fill_id, session)
    collector.set_answer(question_id, request.value)
    return fill_service.fill_info(fill_id, collector)


@router.post("/{fill_id}/input")
def handle_input(fill_id: str, request: FillInputRequest, session: Session = Depends(get_session)) -> QuestionView:
    """Apply one control interaction and return the re-rendered question."""
    collector = fill_service.get_fill(fill_id, session)
    collector.handle_input(request.question_id, request.event)
    question = collector.question(request.question_id)
    index = collector.template.questions.index(question)
    return rendering.render(question, RenderMode.FILL, collector.render_context(), index=index)


@router.post("/{fill_id}/submit", status_code=201)
def submit_fill(fill_id: str, session: Session = Depends(get_session)) -> FormReceipt:
    return fill_service.submit_fill(fill_id, session)


@router.delete("/{fill_id}", status_code=204)
def abandon_fill(fill_id: str, session: Session = Depends(get_session)):
    fill_service.abandon_fill(fill_id, session)
