from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class UserInfo(BaseModel):
    id: str
    username: str
    email: str


class Session(BaseModel):
    """The authenticated caller, passed explicitly into services."""

    user_id: str
    username: str
    email: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class RegisterRequest(BaseModel):
    username: str
    email: str


class TokenResponse(BaseModel):
    token: str
    user: UserInfo


class ChangeRoleRequest(BaseModel):
    role: Role
