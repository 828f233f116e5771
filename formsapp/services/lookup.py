from formsapp.exceptions import AccessDeniedError, NotFoundError, ValidationError
from formsapp.models.users import Role, Session, UserInfo
from formsapp.store import _get_store

MAX_RESULTS = 10


def search_tags(query: str = "", limit: int = MAX_RESULTS) -> list[str]:
    """Tag names starting with the query (case-insensitive), alphabetical."""
    prefix = query.strip().lower()
    names = sorted(record["name"] for record in _get_store().list("tags"))
    return [name for name in names if name.lower().startswith(prefix)][:limit]


def create_tag(name: str) -> str:
    """Register a tag, returning the stored name. Existing tags are reused."""
    name = name.strip()
    if not name:
        raise ValidationError("Tag name cannot be empty.")
    store = _get_store()
    existing = store.get("tags", name.lower())
    if existing:
        return existing["name"]
    store.save("tags", name.lower(), {"name": name})
    return name


def tag_cloud() -> dict[str, int]:
    """Usage count per tag across all templates."""
    counts = {record["name"]: 0 for record in _get_store().list("tags")}
    for template in _get_store().list("templates"):
        for tag in template.get("tags", []):
            counts[tag] = counts.get(tag, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))


def search_users(query: str, limit: int = MAX_RESULTS) -> list[UserInfo]:
    """Users whose username or email contains the query."""
    needle = query.strip().lower()
    if len(needle) < 2:
        raise ValidationError("Missing or too short search parameter.")
    matches = [
        UserInfo(id=u["id"], username=u["username"], email=u["email"])
        for u in _get_store().list("users")
        if needle in u["username"].lower() or needle in u["email"].lower()
    ]
    return matches[:limit]


def change_role(user_id: str, role: Role, session: Session) -> UserInfo:
    if not session.is_admin:
        raise AccessDeniedError("Access denied. Admin role required.")
    if user_id == session.user_id:
        raise ValidationError("You cannot change your own role.")
    store = _get_store()
    user = store.get("users", user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    user["role"] = role.value
    store.save("users", user_id, user)
    return UserInfo(id=user["id"], username=user["username"], email=user["email"])
