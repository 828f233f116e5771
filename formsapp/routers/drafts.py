from fastapi import APIRouter, Depends

from formsapp.auth import get_session
from formsapp.models.common import ValidationResult
from formsapp.models.questions import (
    AddQuestionRequest,
    MoveRequest,
    OptionRequest,
    QuestionTypeInfo,
    ReorderRequest,
    UpdateQuestionFieldRequest,
)
from formsapp.models.templates import CreateDraftRequest, DraftInfo, Template, UpdateDraftRequest
from formsapp.models.users import Session
from formsapp.models.views import RenderMode, TemplateView
from formsapp.services import drafts as drafts_service
from formsapp.services import questions as questions_service
from formsapp.services import rendering

router = APIRouter(prefix="/api/drafts", tags=["drafts"])


def _info(draft_id: str, session: Session) -> DraftInfo:
    return drafts_service.draft_info(draft_id, drafts_service.get_draft(draft_id, session))


# --- Draft lifecycle ---


@router.post("", status_code=201)
def create_draft(request: CreateDraftRequest, session: Session = Depends(get_session)) -> DraftInfo:
    draft_id, builder = drafts_service.create_draft(session, request.template_id)
    return drafts_service.draft_info(draft_id, builder)


@router.get("/{draft_id}")
def get_draft(draft_id: str, session: Session = Depends(get_session)) -> DraftInfo:
    return _info(draft_id, session)


@router.patch("/{draft_id}")
def update_draft(draft_id: str, request: UpdateDraftRequest, session: Session = Depends(get_session)) -> DraftInfo:
    builder = drafts_service.get_draft(draft_id, session)
    builder.update_metadata(**request.model_dump(exclude_none=True))
    return _info(draft_id, session)


@router.delete("/{draft_id}", status_code=204)
def discard_draft(draft_id: str, session: Session = Depends(get_session)):
    drafts_service.discard_draft(draft_id, session)


@router.get("/{draft_id}/view")
def view_draft(
    draft_id: str, mode: RenderMode = RenderMode.BUILDER, session: Session = Depends(get_session),
) -> TemplateView:
    builder = drafts_service.get_draft(draft_id, session)
    return TemplateView(
        mode=mode,
        template_id=builder.template_id,
        title=builder.title,
        description=builder.description,
        questions=rendering.render_questions(builder.questions, mode, builder.render_context()),
    )


@router.get("/{draft_id}/question-types")
def draft_question_types(draft_id: str, session: Session = Depends(get_session)) -> list[QuestionTypeInfo]:
    builder = drafts_service.get_draft(draft_id, session)
    return questions_service.list_type_infos(builder.questions)


@router.get("/{draft_id}/validation")
def validate_draft(draft_id: str, session: Session = Depends(get_session)) -> ValidationResult:
    return drafts_service.get_draft(draft_id, session).validate()


@router.post("/{draft_id}/submit")
def submit_draft(draft_id: str, session: Session = Depends(get_session)) -> Template:
    return drafts_service.save_draft(draft_id, session)


# --- Questions ---


@router.post("/{draft_id}/questions")
def add_question(draft_id: str, request: AddQuestionRequest, session: Session = Depends(get_session)) -> DraftInfo:
    drafts_service.get_draft(draft_id, session).add_question(request.type)
    return _info(draft_id, session)


@router.delete("/{draft_id}/questions/{index}")
def remove_question(draft_id: str, index: int, session: Session = Depends(get_session)) -> DraftInfo:
    drafts_service.get_draft(draft_id, session).remove_question(index)
    return _info(draft_id, session)


@router.patch("/{draft_id}/questions/{index}")
def update_question(
    draft_id: str, index: int, request: UpdateQuestionFieldRequest, session: Session = Depends(get_session),
) -> DraftInfo:
    drafts_service.get_draft(draft_id, session).update_question_field(index, request.field, request.value)
    return _info(draft_id, session)


@router.post("/{draft_id}/questions/{index}/options")
def add_option(
    draft_id: str, index: int, request: OptionRequest, session: Session = Depends(get_session),
) -> DraftInfo:
    drafts_service.get_draft(draft_id, session).add_option(index, request.value)
    return _info(draft_id, session)


@router.put("/{draft_id}/questions/{index}/options/{opt_index}")
def update_option(
    draft_id: str, index: int, opt_index: int, request: OptionRequest, session: Session = Depends(get_session),
) -> DraftInfo:
    drafts_service.get_draft(draft_id, session).update_option(index, opt_index, request.value)
    return _info(draft_id, session)


@router.delete("/{draft_id}/questions/{index}/options/{opt_index}")
def remove_option(draft_id: str, index: int, opt_index: int, session: Session = Depends(get_session)) -> DraftInfo:
    drafts_service.get_draft(draft_id, session).remove_option(index, opt_index)
    return _info(draft_id, session)


# --- Ordering ---


@router.post("/{draft_id}/reorder")
def reorder(draft_id: str, request: ReorderRequest, session: Session = Depends(get_session)) -> DraftInfo:
    drafts_service.get_draft(draft_id, session).reorder(request.from_index, request.to_index)
    return _info(draft_id, session)


@router.post("/{draft_id}/move")
def move(draft_id: str, request: MoveRequest, session: Session = Depends(get_session)) -> DraftInfo:
    drafts_service.get_draft(draft_id, session).move(request.item_id, request.over_id)
    return _info(draft_id, session)
