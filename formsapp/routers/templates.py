from fastapi import APIRouter, Depends

from formsapp.auth import get_session
from formsapp.exceptions import AccessDeniedError
from formsapp.models.answers import FormInfo
from formsapp.models.templates import CreateTemplateRequest, Template, UpdateTemplateRequest
from formsapp.models.users import Session
from formsapp.models.views import RenderMode, TemplateView
from formsapp.services import persistence, rendering
from formsapp.services.builder import TemplateBuilder

router = APIRouter(prefix="/api/templates", tags=["templates"])


@router.get("")
def list_templates(q: str | None = None, session: Session = Depends(get_session)) -> list[Template]:
    return persistence.list_templates(session, query=q)


@router.post("", status_code=201)
def create_template(request: CreateTemplateRequest, session: Session = Depends(get_session)) -> Template:
    builder = TemplateBuilder(author_id=session.user_id)
    builder.update_metadata(**request.model_dump(exclude={"questions"}))
    builder.replace_questions(request.questions)
    return persistence.save_template(builder.submit(), session)


@router.get("/{template_id}")
def get_template(template_id: str, session: Session = Depends(get_session)) -> Template:
    return persistence.load_template(template_id, session)


@router.put("/{template_id}")
def update_template(
    template_id: str, request: UpdateTemplateRequest, session: Session = Depends(get_session),
) -> Template:
    template = persistence.load_template(template_id, session)
    if not persistence.can_edit(template, session):
        raise AccessDeniedError("Only the author can modify this template.")
    builder = TemplateBuilder(template=template)
    builder.update_metadata(**request.model_dump(exclude={"questions"}, exclude_none=True))
    if request.questions is not None:
        builder.replace_questions(request.questions)
    return persistence.save_template(builder.submit(), session)


@router.delete("/{template_id}", status_code=204)
def delete_template(template_id: str, session: Session = Depends(get_session)):
    persistence.delete_template(template_id, session)


@router.get("/{template_id}/render")
def render_template(
    template_id: str, mode: RenderMode = RenderMode.PREVIEW, session: Session = Depends(get_session),
) -> TemplateView:
    template = persistence.load_template(template_id, session)
    return rendering.render_template(template, mode)


@router.get("/{template_id}/forms")
def list_template_forms(template_id: str, session: Session = Depends(get_session)) -> list[FormInfo]:
    return persistence.list_template_forms(template_id, session)
