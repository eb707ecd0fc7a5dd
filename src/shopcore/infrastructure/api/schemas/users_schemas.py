"""Pydantic schemas for user endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class MyUserDetail(BaseModel):
    """The caller's own record plus resolved role."""

    id: str
    name: str
    email: str
    role_id: int
    created_at: datetime | None = None
    role: dict[str, Any] | None = None


class MyUserResponse(BaseModel):
    """Response for ``GET /my-user``."""

    user: MyUserDetail


class RoleSummary(BaseModel):
    """Role name and account-level flags shown in user listings."""

    name: str
    can_post_login: bool
    can_get_my_user: bool
    can_get_users: bool


class UserListItem(BaseModel):
    """User entry in the admin listing."""

    id: str
    name: str
    email: str
    role_id: int
    created_at: datetime
    roles: RoleSummary | None = None


class UserListResponse(BaseModel):
    """Response for ``GET /users``."""

    users: list[UserListItem]
    count: int
