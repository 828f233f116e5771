from fastapi import APIRouter, Depends

from formsapp.auth import get_session, require_admin
from formsapp.models.users import ChangeRoleRequest, Session, UserInfo
from formsapp.services import lookup

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/autocomplete")
def autocomplete_users(q: str = "", session: Session = Depends(get_session)) -> list[UserInfo]:
    return lookup.search_users(q)


@router.patch("/{user_id}/role")
def change_role(user_id: str, request: ChangeRoleRequest, session: Session = Depends(require_admin)) -> UserInfo:
    return lookup.change_role(user_id, request.role, session)
