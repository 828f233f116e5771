from fastmcp import FastMCP
from pydantic import ValidationError as PydanticValidationError

from formsapp.auth import session_for_token
from formsapp.exceptions import (
    AccessDeniedError,
    AnswerValidationError,
    AuthenticationError,
    NotFoundError,
    PersistenceError,
    UnsupportedQuestionTypeError,
    ValidationError,
)
from formsapp.models.leads import BehaviorData, LeadData
from formsapp.models.views import RenderMode
from formsapp.services import answers as answers_service
from formsapp.services import lead_scoring
from formsapp.services import persistence
from formsapp.services import questions as questions_service
from formsapp.services import rendering

mcp = FastMCP("FormsApp")

_ERRORS = (
    AuthenticationError,
    AccessDeniedError,
    NotFoundError,
    PersistenceError,
    UnsupportedQuestionTypeError,
    ValidationError,
)


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, AuthenticationError):
        return {"error": "auth_error", "message": str(e), "action": "Ask user to register at /auth/register for a token"}
    if isinstance(e, AccessDeniedError):
        return {"error": "access_denied", "message": str(e)}
    if isinstance(e, NotFoundError):
        return {"error": "not_found", "message": str(e)}
    if isinstance(e, AnswerValidationError):
        return {"error": "validation_error", "message": str(e), "field_errors": e.field_errors}
    if isinstance(e, ValidationError):
        return {"error": "validation_error", "message": str(e), "errors": e.errors}
    if isinstance(e, UnsupportedQuestionTypeError):
        return {"error": "unsupported_question_type", "message": str(e)}
    if isinstance(e, PersistenceError):
        return {"error": "persistence_error", "message": str(e), "action": "Retry once the store is reachable"}
    return {"error": "unknown_error", "message": str(e)}


# --- Question type tools ---

@mcp.tool
def question_types() -> dict:
    """List the supported question types with their label, icon and per-template limit (null means unlimited)."""
    infos = questions_service.list_type_infos()
    return {"question_types": [i.model_dump() for i in infos], "count": len(infos)}


# --- Template tools ---

@mcp.tool
def templates_list(token: str, query: str = "") -> dict:
    """List templates visible to the user, newest first.
    Use query to filter by a word in the title, description or tags."""
    try:
        session = session_for_token(token)
        templates = persistence.list_templates(session, query=query or None)
        return {
            "templates": [{"id": t.id, "title": t.title, "topic": t.topic.value, "tags": t.tags} for t in templates],
            "count": len(templates),
        }
    except _ERRORS as e:
        return _handle_mcp_error(e)


@mcp.tool
def templates_get(token: str, template_id: str) -> dict:
    """Get a template with all of its questions. Use templates_list first to find the template ID."""
    try:
        return persistence.load_template(template_id, session_for_token(token)).model_dump(mode="json")
    except _ERRORS as e:
        return _handle_mcp_error(e)


@mcp.tool
def templates_render(token: str, template_id: str, mode: str = "preview") -> dict:
    """Render a template as structured views. Mode is 'preview', 'fill' or 'builder'."""
    if mode not in {m.value for m in RenderMode}:
        return {"error": "validation_error", "message": f"Unknown render mode: {mode}"}
    try:
        template = persistence.load_template(template_id, session_for_token(token))
        return rendering.render_template(template, RenderMode(mode)).model_dump(mode="json")
    except _ERRORS as e:
        return _handle_mcp_error(e)


# --- Form tools ---

@mcp.tool
def forms_check(token: str, template_id: str, answers: dict) -> dict:
    """Check an answer set against a template without submitting it.
    Answers are keyed by question ID. Returns field_errors for unanswered required questions."""
    try:
        template = persistence.load_template(template_id, session_for_token(token))
        answers_service.check_answer_keys(template, answers)
        errors = answers_service.validate_all(template, answers)
        return {"is_valid": not errors, "field_errors": errors}
    except _ERRORS as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_submit(token: str, template_id: str, answers: dict) -> dict:
    """Submit answers to a template. Answers are keyed by question ID.
    Grid answers map row index to the chosen column (or list of columns)."""
    try:
        return persistence.submit_answers(template_id, answers, session_for_token(token)).model_dump()
    except _ERRORS as e:
        return _handle_mcp_error(e)


# --- Lead tools ---

@mcp.tool
def leads_score(lead: dict, behavior: dict | None = None) -> dict:
    """Score a sales lead from company data (company, industry, number_of_employees, annual_revenue, ...)
    and optional engagement (form_submissions, website_visits, demo_requested)."""
    try:
        score = lead_scoring.calculate_lead_score(
            LeadData.model_validate(lead),
            BehaviorData.model_validate(behavior or {}),
        )
        return score.model_dump()
    except PydanticValidationError as e:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        return {"error": "validation_error", "message": "Invalid lead data", "errors": errors}
