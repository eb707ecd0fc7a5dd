"""Persistence for API keys."""

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.infrastructure.persistence.models import APIKeyModel


class APIKeyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, api_key: APIKeyModel) -> APIKeyModel:
        self.session.add(api_key)
        await self.session.flush()
        await self.session.refresh(api_key)
        return api_key

    async def get_by_id(self, key_id: str) -> APIKeyModel | None:
        return await self.session.get(APIKeyModel, key_id)

    async def list_by_prefix(self, key_prefix: str) -> Sequence[APIKeyModel]:
        """Candidate keys for a presented key.

        The prefix is not secret; every candidate's digest still has to be
        verified against the full key.
        """
        result = await self.session.execute(
            select(APIKeyModel).where(APIKeyModel.key_prefix == key_prefix)
        )
        return result.scalars().all()

    async def list_by_user(self, user_id: str) -> Sequence[APIKeyModel]:
        """A user's keys, newest first."""
        result = await self.session.execute(
            select(APIKeyModel)
            .where(APIKeyModel.user_id == user_id)
            .order_by(APIKeyModel.created_at.desc())
        )
        return result.scalars().all()

    async def delete(self, key_id: str) -> bool:
        """Remove a key; True when a row was actually deleted."""
        result = await self.session.execute(delete(APIKeyModel).where(APIKeyModel.id == key_id))
        await self.session.flush()
        return result.rowcount > 0
