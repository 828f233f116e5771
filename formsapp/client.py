"""Remote persistence and lookup collaborator over the FormsApp REST API."""

import logging
from typing import Any

import requests

from formsapp.config import get_settings
from formsapp.exceptions import (
    AccessDeniedError,
    AnswerValidationError,
    AuthenticationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from formsapp.http_client import get_session
from formsapp.models.answers import FormReceipt
from formsapp.models.templates import Template
from formsapp.models.users import UserInfo

logger = logging.getLogger(__name__)


def _raise_for_response(resp: requests.Response) -> None:
    if resp.ok:
        return
    try:
        body = resp.json()
    except ValueError:
        body = {}
    message = body.get("message") or resp.text or f"HTTP {resp.status_code}"
    if resp.status_code == 401:
        raise AuthenticationError(message)
    if resp.status_code == 403:
        raise AccessDeniedError(message)
    if resp.status_code == 404:
        raise NotFoundError(message)
    if resp.status_code in (400, 422):
        if body.get("field_errors"):
            raise AnswerValidationError(body["field_errors"])
        raise ValidationError(body.get("errors") or [message])
    raise PersistenceError(f"FormsApp API error {resp.status_code}: {message}")


class FormsAppClient:
    """Calls a FormsApp server with a bearer token. Failures are raised, never retried."""

    def __init__(self, token: str, base_url: str | None = None, timeout: float | None = None):
        settings = get_settings()
        self.token = token
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            resp = get_session().request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise PersistenceError(f"Could not reach FormsApp at {self.base_url}: {e}") from e
        _raise_for_response(resp)
        return resp.json() if resp.content else None

    # --- Persistence ---

    def load_template(self, template_id: str) -> Template:
        return Template.model_validate(self._request("GET", f"/api/templates/{template_id}"))

    def save_template(self, template: Template) -> Template:
        payload = template.model_dump(mode="json", exclude={"id", "author_id", "created_at", "updated_at"})
        if template.id is None:
            data = self._request("POST", "/api/templates", json=payload)
        else:
            data = self._request("PUT", f"/api/templates/{template.id}", json=payload)
        return Template.model_validate(data)

    def submit_answers(self, template_id: str, answers: dict[str, Any]) -> FormReceipt:
        data = self._request("POST", "/api/forms", json={"template_id": template_id, "answers": answers})
        return FormReceipt.model_validate(data)

    # --- Lookup ---

    def search_tags(self, query: str = "") -> list[str]:
        return self._request("GET", "/api/tags", params={"search": query})

    def create_tag(self, name: str) -> str:
        return self._request("POST", "/api/tags", json={"name": name})["name"]

    def search_users(self, query: str) -> list[UserInfo]:
        data = self._request("GET", "/api/users/autocomplete", params={"q": query})
        return [UserInfo.model_validate(u) for u in data]
