"""Pydantic schemas for API key operations."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

APIKeyName = Annotated[
    str,
    StringConstraints(min_length=2, max_length=50, pattern=r"^[a-zA-Z0-9\s\-_]+$"),
]


class APIKeyCreateRequest(BaseModel):
    """Request schema for creating an API key."""

    name: APIKeyName = Field(
        ...,
        description="Letters, numbers, spaces, dashes and underscores",
    )


class APIKeyInfo(BaseModel):
    """Stored API key metadata. Never includes key material."""

    id: str
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class APIKeyCreateResponse(BaseModel):
    """Response schema for a newly created API key."""

    message: str = "API key created successfully"
    warning: str = "Save this key now. You will not be able to see it again."
    api_key: str  # Plaintext key, only returned once
    key_info: APIKeyInfo


class APIKeyListResponse(BaseModel):
    """Response schema for listing API keys."""

    count: int
    api_keys: list[APIKeyInfo]


class APIKeyDeletedResponse(BaseModel):
    message: str
