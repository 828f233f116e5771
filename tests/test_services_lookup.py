import pytest

from formsapp.auth import register_user
from formsapp.exceptions import AccessDeniedError, NotFoundError, ValidationError
from formsapp.models.users import Role
from formsapp.services import lookup, persistence
from conftest import ADMIN, ALICE, make_template


class TestTags:
    def test_create_is_idempotent(self):
        assert lookup.create_tag("  Science ") == "Science"
        assert lookup.create_tag("science") == "Science"
        assert lookup.search_tags() == ["Science"]

    def test_empty_name(self):
        with pytest.raises(ValidationError):
            lookup.create_tag("   ")

    def test_prefix_search(self):
        for name in ["beta", "Alpha", "alpine", "gamma"]:
            lookup.create_tag(name)
        assert lookup.search_tags("AL") == ["Alpha", "alpine"]

    def test_limit(self):
        for i in range(15):
            lookup.create_tag(f"tag{i:02d}")
        assert len(lookup.search_tags("tag")) == 10

    def test_cloud_counts_usage(self):
        persistence.save_template(make_template(tags=["a", "b"]), ALICE)
        persistence.save_template(make_template(tags=["b"]), ALICE)
        lookup.create_tag("unused")
        assert lookup.tag_cloud() == {"b": 2, "a": 1, "unused": 0}


class TestUsers:
    def test_search(self):
        register_user("ada", "ada@example.com")
        register_user("alice", "alice@example.com")
        assert [u.username for u in lookup.search_users("ali")] == ["alice"]
        assert len(lookup.search_users("example")) == 2

    def test_short_query(self):
        with pytest.raises(ValidationError, match="too short"):
            lookup.search_users("a")


class TestChangeRole:
    def test_admin_promotes(self):
        register_user("ada", "ada@example.com")
        user = register_user("alice", "alice@example.com").user
        assert lookup.change_role(user.id, Role.ADMIN, ADMIN).username == "alice"

    def test_non_admin(self):
        with pytest.raises(AccessDeniedError):
            lookup.change_role("1", Role.ADMIN, ALICE)

    def test_own_role(self):
        with pytest.raises(ValidationError):
            lookup.change_role("1", Role.USER, ADMIN)

    def test_missing_user(self):
        with pytest.raises(NotFoundError):
            lookup.change_role("99", Role.USER, ADMIN)
