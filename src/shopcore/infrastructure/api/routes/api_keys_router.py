"""Router for API key management.

Keys are created, listed and deleted by their owner, authenticated with a
bearer token. An API key cannot be used to manage API keys.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from shopcore.core.logging import get_logger
from shopcore.domain.exceptions import PermissionDeniedError
from shopcore.infrastructure.api.dependencies import BearerPrincipal, DbSession
from shopcore.infrastructure.api.schemas.api_key_schemas import (
    APIKeyCreateRequest,
    APIKeyCreateResponse,
    APIKeyDeletedResponse,
    APIKeyInfo,
    APIKeyListResponse,
)
from shopcore.infrastructure.auth import api_key_service
from shopcore.infrastructure.persistence.repositories import APIKeyRepository

router = APIRouter(tags=["API Keys"])
logger = get_logger(__name__)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=APIKeyCreateResponse,
    summary="Create a new API key",
)
async def create_api_key(
    data: APIKeyCreateRequest,
    principal: BearerPrincipal,
    session: DbSession,
) -> APIKeyCreateResponse:
    """Create an API key for the caller.

    Returns the full plaintext key which will NEVER be shown again.
    """
    plaintext_key, model = await api_key_service.create_api_key(
        session=session,
        user_id=principal.id,
        name=data.name,
    )
    await session.commit()

    return APIKeyCreateResponse(
        api_key=plaintext_key,
        key_info=APIKeyInfo.model_validate(model),
    )


@router.get("", response_model=APIKeyListResponse, summary="List my API keys")
async def list_api_keys(principal: BearerPrincipal, session: DbSession) -> APIKeyListResponse:
    """List the caller's keys, newest first. Key material is never returned."""
    keys = await APIKeyRepository(session).list_by_user(principal.id)
    return APIKeyListResponse(
        count=len(keys),
        api_keys=[APIKeyInfo.model_validate(k) for k in keys],
    )


@router.delete(
    "/{key_id}",
    response_model=APIKeyDeletedResponse,
    summary="Delete an API key",
    responses={
        403: {"description": "Key belongs to another user"},
        404: {"description": "Key not found"},
    },
)
async def delete_api_key(
    key_id: str,
    principal: BearerPrincipal,
    session: DbSession,
) -> APIKeyDeletedResponse | JSONResponse:
    """Delete one of the caller's keys."""
    repo = APIKeyRepository(session)
    key = await repo.get_by_id(key_id)
    if key is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "API key not found"},
        )

    if key.user_id != principal.id:
        logger.info("API key deletion refused: not owner", key_id=key_id, user_id=principal.id)
        raise PermissionDeniedError(
            f"user {principal.id} does not own key {key_id}",
            message="You do not own this API key",
        )

    await repo.delete(key_id)
    await session.commit()

    logger.info("API key deleted", key_id=key_id, user_id=principal.id)
    return APIKeyDeletedResponse(message="API key deleted successfully")
