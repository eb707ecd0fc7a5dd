"""User API routes: the caller's profile, password changes and the user list."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from shopcore.core.logging import get_logger
from shopcore.domain.entities import Capability, Principal
from shopcore.domain.exceptions import OldPasswordIncorrectError
from shopcore.infrastructure.api.dependencies import DbSession, require_capability
from shopcore.infrastructure.api.schemas.auth_schemas import (
    ChangePasswordRequest,
    MessageResponse,
)
from shopcore.infrastructure.api.schemas.users_schemas import (
    MyUserDetail,
    MyUserResponse,
    RoleSummary,
    UserListItem,
    UserListResponse,
)
from shopcore.infrastructure.auth import hash_password, verify_password
from shopcore.infrastructure.persistence.repositories import RoleRepository, UserRepository

logger = get_logger(__name__)

router = APIRouter()


@router.get("/my-user", response_model=MyUserResponse)
async def get_my_user(
    principal: Annotated[Principal, Depends(require_capability(Capability.GET_MY_USER))],
    session: DbSession,
) -> MyUserResponse:
    """Return the caller's record with its resolved role."""
    user = await UserRepository(session).get_by_id(principal.id)
    created_at = user.created_at if user is not None else None
    return MyUserResponse(
        user=MyUserDetail(**principal.to_dict(), created_at=created_at),
    )


@router.patch(
    "/my-user/password",
    response_model=MessageResponse,
    responses={401: {"description": "Old password incorrect"}},
)
async def change_password(
    request: ChangePasswordRequest,
    principal: Annotated[Principal, Depends(require_capability(Capability.POST_LOGIN))],
    session: DbSession,
) -> MessageResponse | JSONResponse:
    """Change the caller's password.

    Bumps the token version, which invalidates every access token issued
    before the change.
    """
    user_repo = UserRepository(session)
    user = await user_repo.get_by_id(principal.id)
    if user is None:
        return JSONResponse(status_code=404, content={"error": "User not found"})

    if not await asyncio.to_thread(verify_password, request.old_password, user.password_hash):
        logger.info("Password change rejected: old password incorrect", user_id=user.id)
        raise OldPasswordIncorrectError()

    new_hash = await asyncio.to_thread(hash_password, request.new_password)
    await user_repo.update_password(user.id, new_hash)
    await session.commit()

    logger.info("Password changed, outstanding tokens invalidated", user_id=user.id)
    return MessageResponse(
        message="Password changed successfully. Please login again with your new password.",
    )


@router.get("/users", response_model=UserListResponse)
async def list_users(
    principal: Annotated[Principal, Depends(require_capability(Capability.GET_USERS))],
    session: DbSession,
) -> UserListResponse:
    """List every user with a summary of their role."""
    users = await UserRepository(session).list_all()
    roles = await RoleRepository(session).get_by_ids({u.role_id for u in users})

    items = []
    for user in users:
        role = roles.get(user.role_id)
        items.append(
            UserListItem(
                id=user.id,
                name=user.name,
                email=user.email,
                role_id=user.role_id,
                created_at=user.created_at,
                roles=RoleSummary(
                    name=role.name,
                    can_post_login=role.can_post_login,
                    can_get_my_user=role.can_get_my_user,
                    can_get_users=role.can_get_users,
                )
                if role is not None
                else None,
            )
        )
    return UserListResponse(users=items, count=len(items))
