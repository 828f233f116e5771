import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.routing import Mount

from formsapp.auth import router as auth_router
from formsapp.config import get_settings
from formsapp.exceptions import (
    AccessDeniedError,
    AnswerValidationError,
    AuthenticationError,
    NotFoundError,
    PersistenceError,
    UnsupportedQuestionTypeError,
    ValidationError,
)
from formsapp.mcp_server import mcp
from formsapp.models.common import ErrorResponse
from formsapp.routers.comments import router as comments_router
from formsapp.routers.drafts import router as drafts_router
from formsapp.routers.fill import router as fill_router
from formsapp.routers.forms import router as forms_router
from formsapp.routers.leads import router as leads_router
from formsapp.routers.question_types import router as question_types_router
from formsapp.routers.tags import router as tags_router
from formsapp.routers.templates import router as templates_router
from formsapp.routers.users import router as users_router

logger = logging.getLogger(__name__)


# --- FastAPI app ---

api = FastAPI(title="FormsApp", version="0.1.0")
api.include_router(auth_router)
api.include_router(question_types_router)
api.include_router(templates_router)
api.include_router(drafts_router)
api.include_router(forms_router)
api.include_router(fill_router)
api.include_router(tags_router)
api.include_router(users_router)
api.include_router(leads_router)
api.include_router(comments_router)


@api.get("/api/status")
def api_status() -> dict:
    settings = get_settings()
    return {"store_file": str(settings.store_file), "ready": True}


# --- Exception handlers ---

def _error(status_code: int, error_code: str, exc: Exception, **extra) -> JSONResponse:
    body = ErrorResponse(error_code=error_code, message=str(exc), **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@api.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    if isinstance(exc, AnswerValidationError):
        return _error(422, "validation_error", exc, errors=exc.errors, field_errors=exc.field_errors)
    return _error(422, "validation_error", exc, errors=exc.errors)


@api.exception_handler(UnsupportedQuestionTypeError)
async def unsupported_type_handler(request: Request, exc: UnsupportedQuestionTypeError):
    return _error(422, "unsupported_question_type", exc)


@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return _error(401, "auth_error", exc)


@api.exception_handler(AccessDeniedError)
async def access_denied_handler(request: Request, exc: AccessDeniedError):
    return _error(403, "access_denied", exc)


@api.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, "not_found", exc)


@api.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
    return _error(500, "persistence_error", exc)


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "formsapp.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
