import pytest

from fastapi.testclient import TestClient

from formsapp.config import get_settings
from formsapp.models.questions import Question
from formsapp.models.templates import Template, Topic
from formsapp.models.users import Role, Session


# --- Canned data ---

ADMIN = Session(user_id="1", username="ada", email="ada@example.com", role=Role.ADMIN)
ALICE = Session(user_id="2", username="alice", email="alice@example.com")
BOB = Session(user_id="3", username="bob", email="bob@example.com")


def make_question(question_type: str, question_id: str, **fields) -> Question:
    """A complete question of the given type, ready to be saved."""
    from formsapp.services.questions import create_default

    question = create_default(question_type)
    question.id = question_id
    question.title = fields.pop("title", f"Question {question_id}")
    question.question_text = fields.pop("question_text", "Please answer")
    return question.model_copy(update=fields)


def make_template(**fields) -> Template:
    data = {
        "title": "Satisfaction Survey",
        "description": "How did we do?",
        "topic": Topic.QUIZ,
        "questions": [make_question("radio", "q1", options=["Yes", "No"], required=True)],
    }
    data.update(fields)
    return Template(**data)


# --- Fixtures ---

@pytest.fixture(autouse=True)
def store_file(tmp_path, monkeypatch):
    """Point the JSON store at a fresh file for every test."""
    path = tmp_path / "formsapp.json"
    monkeypatch.setenv("FORMSAPP_STORE_FILE", str(path))
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clear_sessions():
    from formsapp.services.drafts import clear_drafts
    from formsapp.services.fill import clear_fills

    yield
    clear_drafts()
    clear_fills()


@pytest.fixture
def admin_token():
    """The first registered user, who becomes admin."""
    from formsapp.auth import register_user
    return register_user("ada", "ada@example.com").token


@pytest.fixture
def user_token(admin_token):
    from formsapp.auth import register_user
    return register_user("alice", "alice@example.com").token


@pytest.fixture
def other_token(admin_token):
    from formsapp.auth import register_user
    return register_user("bob", "bob@example.com").token


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from formsapp.main import api
    return TestClient(api)
