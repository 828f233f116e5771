import logging
import secrets

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from formsapp.exceptions import AccessDeniedError, AuthenticationError, ValidationError
from formsapp.models.users import RegisterRequest, Role, Session, TokenResponse, UserInfo
from formsapp.store import _get_store

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def session_for_token(token: str) -> Session:
    """Resolve a bearer token to the session of the user who owns it."""
    store = _get_store()
    user_id = store.get("tokens", token)
    user = store.get("users", user_id) if user_id else None
    if not user:
        raise AuthenticationError("Invalid or expired token. Register at /auth/register to get one.")
    return Session(
        user_id=user["id"],
        username=user["username"],
        email=user["email"],
        role=user.get("role", Role.USER.value),
    )


def get_session(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> Session:
    if credentials is None:
        raise AuthenticationError("Missing bearer token.")
    return session_for_token(credentials.credentials)


def require_admin(session: Session = Depends(get_session)) -> Session:
    if not session.is_admin:
        raise AccessDeniedError("Access denied. Admin role required.")
    return session


def issue_token(user_id: str) -> str:
    store = _get_store()
    token = secrets.token_hex(32)
    store.save("tokens", token, user_id)
    return token


def register_user(username: str, email: str) -> TokenResponse:
    """Create a user and hand out its first token. The first user becomes admin."""
    username, email = username.strip(), email.strip().lower()
    if not username or not email:
        raise ValidationError("Username and email are required.")
    store = _get_store()
    users = store.list("users")
    if any(u["username"] == username or u["email"] == email for u in users):
        raise ValidationError("Username or email already registered.")
    user_id = store.next_id("users")
    role = Role.USER if users else Role.ADMIN
    store.save("users", user_id, {"id": user_id, "username": username, "email": email, "role": role.value})
    logger.info("Registered user %s (%s)", username, role.value)
    return TokenResponse(token=issue_token(user_id), user=UserInfo(id=user_id, username=username, email=email))


# --- Auth router ---

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register")
def register(request: RegisterRequest) -> TokenResponse:
    return register_user(request.username, request.email)


@router.post("/token")
def generate_token(session: Session = Depends(get_session)) -> TokenResponse:
    """Issue an additional token for the caller, e.g. for an external integration."""
    return TokenResponse(
        token=issue_token(session.user_id),
        user=UserInfo(id=session.user_id, username=session.username, email=session.email),
    )


@router.get("/me")
def me(session: Session = Depends(get_session)) -> Session:
    return session
