import pytest

from formsapp.services import persistence
from conftest import ALICE, auth, make_question, make_template


@pytest.fixture
def template_id(user_token):
    """The satisfaction survey, authored by alice."""
    return persistence.save_template(make_template(), ALICE).id


class TestSubmitForm:
    def test_blocked_then_accepted(self, api_client, other_token, template_id):
        headers = auth(other_token)
        resp = api_client.post("/api/forms", json={"template_id": template_id, "answers": {}}, headers=headers)
        assert resp.status_code == 422
        assert resp.json()["field_errors"] == {"q1": "Select an option."}
        assert resp.json()["message"] == "Please answer all required fields."

        resp = api_client.post(
            "/api/forms", json={"template_id": template_id, "answers": {"q1": "Yes"}}, headers=headers,
        )
        assert resp.status_code == 201
        form_id = resp.json()["id"]
        assert api_client.get(f"/api/forms/{form_id}", headers=headers).json()["answers"] == {"q1": "Yes"}
        assert [f["id"] for f in api_client.get("/api/forms", headers=headers).json()] == [form_id]

    def test_unknown_question_id(self, api_client, other_token, template_id):
        resp = api_client.post(
            "/api/forms", json={"template_id": template_id, "answers": {"q1": "Yes", "zz": 1}},
            headers=auth(other_token),
        )
        assert resp.status_code == 422
        assert resp.json()["errors"] == ["Unknown question id: zz"]

    def test_check_does_not_store(self, api_client, other_token, template_id):
        headers = auth(other_token)
        resp = api_client.post("/api/forms/check", json={"template_id": template_id, "answers": {}}, headers=headers)
        assert resp.json() == {"is_valid": False, "field_errors": {"q1": "Select an option."}}
        assert api_client.get("/api/forms", headers=headers).json() == []

    def test_author_sees_template_forms(self, api_client, user_token, other_token, template_id):
        api_client.post(
            "/api/forms", json={"template_id": template_id, "answers": {"q1": "No"}}, headers=auth(other_token),
        )
        resp = api_client.get(f"/api/templates/{template_id}/forms", headers=auth(user_token))
        assert len(resp.json()) == 1
        resp = api_client.get(f"/api/templates/{template_id}/forms", headers=auth(other_token))
        assert resp.status_code == 403


class TestFillSession:
    @pytest.fixture
    def fill_id(self, api_client, other_token, template_id):
        resp = api_client.post("/api/fill", json={"template_id": template_id}, headers=auth(other_token))
        assert resp.status_code == 201
        return resp.json()["id"]

    def test_scenario(self, api_client, other_token, fill_id):
        headers = auth(other_token)
        resp = api_client.post(f"/api/fill/{fill_id}/submit", headers=headers)
        assert resp.status_code == 422
        assert resp.json()["field_errors"] == {"q1": "Select an option."}

        view = api_client.get(f"/api/fill/{fill_id}/view", headers=headers).json()
        assert view["questions"][0]["error"] == "Select an option."

        resp = api_client.post(
            f"/api/fill/{fill_id}/input", json={"question_id": "q1", "event": "Yes"}, headers=headers,
        )
        assert resp.json()["input"]["value"] == "Yes"
        assert resp.json()["error"] is None

        resp = api_client.post(f"/api/fill/{fill_id}/submit", headers=headers)
        assert resp.status_code == 201
        assert api_client.get(f"/api/fill/{fill_id}", headers=headers).status_code == 404

    def test_set_answer(self, api_client, other_token, fill_id):
        resp = api_client.put(f"/api/fill/{fill_id}/answers/q1", json={"value": "No"}, headers=auth(other_token))
        assert resp.json()["answers"] == {"q1": "No"}

    def test_set_unknown_answer(self, api_client, other_token, fill_id):
        resp = api_client.put(f"/api/fill/{fill_id}/answers/q5", json={"value": "No"}, headers=auth(other_token))
        assert resp.status_code == 404

    def test_bad_input(self, api_client, other_token, fill_id):
        resp = api_client.post(
            f"/api/fill/{fill_id}/input", json={"question_id": "q1", "event": "Maybe"}, headers=auth(other_token),
        )
        assert resp.status_code == 422

    def test_abandon_stores_nothing(self, api_client, other_token, fill_id):
        headers = auth(other_token)
        api_client.put(f"/api/fill/{fill_id}/answers/q1", json={"value": "Yes"}, headers=headers)
        assert api_client.delete(f"/api/fill/{fill_id}", headers=headers).status_code == 204
        assert api_client.get("/api/forms", headers=headers).json() == []

    def test_disabled_view(self, api_client, other_token, fill_id):
        view = api_client.get(f"/api/fill/{fill_id}/view?disabled=true", headers=auth(other_token)).json()
        assert view["questions"][0]["input"]["disabled"] is True


class TestUnsupportedType:
    def test_fill_view_warns(self, api_client, user_token):
        template = make_template(questions=[make_question("text", "q1")])
        saved = persistence.save_template(template, ALICE)
        stored = saved.model_copy(update={"questions": [saved.questions[0].model_copy(update={"type": "integer"})]})
        from formsapp.store import _get_store
        _get_store().save("templates", saved.id, stored.model_dump(mode="json"))

        resp = api_client.get(f"/api/templates/{saved.id}/render?mode=fill", headers=auth(user_token))
        assert resp.status_code == 200
        assert resp.json()["questions"][0]["warning"] == "Unsupported question type: integer"
