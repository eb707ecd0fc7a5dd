"""Authentication API routes.

Provides endpoints for user registration and login.
"""

import asyncio
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from shopcore.core.logging import get_logger
from shopcore.domain.entities import Capability, RoleTier
from shopcore.domain.exceptions import InvalidCredentialsError, PermissionDeniedError
from shopcore.domain.services import LoginThrottle
from shopcore.infrastructure.api.dependencies import DbSession, get_login_throttle
from shopcore.infrastructure.api.schemas.auth_schemas import (
    LoginRequest,
    LoginResponse,
    LoginUser,
    RegisterRequest,
    RegisterResponse,
)
from shopcore.infrastructure.auth import (
    hash_password,
    needs_rehash,
    token_codec,
    verify_dummy_password,
    verify_password,
)
from shopcore.infrastructure.persistence.models import UserModel
from shopcore.infrastructure.persistence.repositories import RoleRepository, UserRepository

logger = get_logger(__name__)

router = APIRouter()


def _email_taken() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": "Email already registered"},
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses={
        400: {"description": "Validation error"},
        409: {"description": "Email already registered"},
    },
)
async def register(request: RegisterRequest, session: DbSession) -> RegisterResponse | JSONResponse:
    """Register a new user with the USER role."""
    email = str(request.email)
    user_repo = UserRepository(session)

    if await user_repo.email_exists(email):
        logger.info("Registration rejected: email already registered", email=email)
        return _email_taken()

    role = await RoleRepository(session).get_by_name(RoleTier.USER.value)
    if role is None:
        logger.error("Registration failed: USER role missing")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Roles table not configured"},
        )

    user = UserModel(
        id=str(uuid.uuid4()),
        name=request.name,
        email=email,
        password_hash=await asyncio.to_thread(hash_password, request.password),
        role_id=role.id,
        token_version=1,
    )
    try:
        await user_repo.create(user)
        await session.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration with the same email
        await session.rollback()
        logger.info("Registration rejected: email already registered", email=email)
        return _email_taken()

    logger.info("User registered", user_id=user.id, email=email)
    return RegisterResponse(id=user.id, name=user.name, email=user.email)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Role does not allow login"},
        429: {"description": "Login retried within the cooldown"},
    },
)
async def login(
    request: LoginRequest,
    session: DbSession,
    throttle: Annotated[LoginThrottle, Depends(get_login_throttle)],
) -> LoginResponse:
    """Authenticate with email and password and return an access token.

    Unknown email and wrong password produce the same 401.
    """
    email = str(request.email)
    throttle.enforce(email)

    user = await UserRepository(session).get_by_email(email)
    if user is None:
        await asyncio.to_thread(verify_dummy_password, request.password)
        logger.info("Login failed: unknown email")
        raise InvalidCredentialsError("unknown email")

    if not await asyncio.to_thread(verify_password, request.password, user.password_hash):
        logger.info("Login failed: wrong password", user_id=user.id)
        raise InvalidCredentialsError("wrong password")

    role = await RoleRepository(session).get_by_id(user.role_id)
    if role is None or not role.grant().allows(Capability.POST_LOGIN):
        logger.info("Login refused by role", user_id=user.id, role_id=user.role_id)
        raise PermissionDeniedError(
            f"role {user.role_id} lacks {Capability.POST_LOGIN.value}",
            message="Account is banned or does not have login permission",
        )

    if needs_rehash(user.password_hash):
        new_hash = await asyncio.to_thread(hash_password, request.password)
        await UserRepository(session).replace_password_hash(user.id, new_hash)
        await session.commit()
        logger.info("Password hash upgraded to current parameters", user_id=user.id)

    token = token_codec.sign(user.id, user.email, user.token_version)
    logger.info("User logged in", user_id=user.id)

    return LoginResponse(
        token=token,
        expires_in=token_codec.ttl_seconds,
        user=LoginUser(id=user.id, name=user.name, email=user.email),
    )
