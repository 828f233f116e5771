import pytest

from formsapp.exceptions import PersistenceError
from conftest import auth


class TestTags:
    def test_create_and_search(self, api_client, user_token):
        headers = auth(user_token)
        assert api_client.post("/api/tags", json={"name": "Biology"}, headers=headers).json() == {"name": "Biology"}
        assert api_client.get("/api/tags?search=bio", headers=headers).json() == ["Biology"]
        assert api_client.get("/api/tags/cloud", headers=headers).json() == {"Biology": 0}


class TestUsers:
    def test_autocomplete(self, api_client, user_token):
        resp = api_client.get("/api/users/autocomplete?q=ali", headers=auth(user_token))
        assert [u["username"] for u in resp.json()] == ["alice"]

    def test_autocomplete_too_short(self, api_client, user_token):
        resp = api_client.get("/api/users/autocomplete?q=a", headers=auth(user_token))
        assert resp.status_code == 422

    def test_change_role_requires_admin(self, api_client, user_token, other_token):
        resp = api_client.patch("/api/users/3/role", json={"role": "admin"}, headers=auth(user_token))
        assert resp.status_code == 403

    def test_admin_changes_role(self, api_client, admin_token, user_token):
        resp = api_client.patch("/api/users/2/role", json={"role": "admin"}, headers=auth(admin_token))
        assert resp.status_code == 200
        assert api_client.get("/auth/me", headers=auth(user_token)).json()["role"] == "admin"


class TestRegister:
    def test_duplicate(self, api_client, admin_token):
        resp = api_client.post("/auth/register", json={"username": "ada", "email": "other@example.com"})
        assert resp.status_code == 422

    def test_second_user_is_plain_user(self, api_client, admin_token):
        resp = api_client.post("/auth/register", json={"username": "zed", "email": "zed@example.com"})
        token = resp.json()["token"]
        assert api_client.get("/auth/me", headers=auth(token)).json()["role"] == "user"


class TestLeads:
    def test_score(self, api_client, user_token):
        resp = api_client.post(
            "/api/leads/score",
            json={"lead": {"industry": "finance", "number_of_employees": "50-99"}},
            headers=auth(user_token),
        )
        assert resp.status_code == 200
        assert resp.json()["breakdown"]["industry"] == 18


class TestErrorMapping:
    def test_persistence_error_returns_500(self, api_client, user_token, mocker):
        mock_svc = mocker.patch("formsapp.routers.templates.persistence")
        mock_svc.list_templates.side_effect = PersistenceError("disk full")
        resp = api_client.get("/api/templates", headers=auth(user_token))
        assert resp.status_code == 500
        assert resp.json() == {"error_code": "persistence_error", "message": "disk full"}

    def test_corrupt_store_file(self, api_client, user_token, store_file):
        store_file.write_text("{not json")
        resp = api_client.get("/api/templates", headers=auth(user_token))
        assert resp.status_code == 500
