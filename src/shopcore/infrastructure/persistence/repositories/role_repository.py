"""Lookups for the role tiers.

Roles are seeded, never created through the API, so this repository is
read-only.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.infrastructure.persistence.models import RoleModel


class RoleRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, role_id: int) -> RoleModel | None:
        return await self.session.get(RoleModel, role_id)

    async def get_by_name(self, name: str) -> RoleModel | None:
        """Find a tier by its name, e.g. ``"USER"``."""
        result = await self.session.execute(select(RoleModel).where(RoleModel.name == name))
        return result.scalar_one_or_none()

    async def get_by_ids(self, role_ids: set[int]) -> dict[int, RoleModel]:
        """Load several roles in one query, keyed by ID."""
        if not role_ids:
            return {}
        result = await self.session.execute(select(RoleModel).where(RoleModel.id.in_(role_ids)))
        return {role.id: role for role in result.scalars()}
