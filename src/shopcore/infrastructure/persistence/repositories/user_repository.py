"""Persistence for user accounts."""

from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.infrastructure.persistence.models import UserModel


class UserRepository:
    """Reads and writes :class:`UserModel` rows within the caller's session.

    Writes are flushed but never committed; the route that owns the
    session decides when the unit of work ends.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: str) -> UserModel | None:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> UserModel | None:
        result = await self.session.execute(select(UserModel).where(UserModel.email == email))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self.session.execute(select(UserModel.id).where(UserModel.email == email))
        return result.first() is not None

    async def list_all(self) -> Sequence[UserModel]:
        """Every user, most recently registered first."""
        result = await self.session.execute(select(UserModel).order_by(UserModel.created_at.desc()))
        return result.scalars().all()

    async def update_password(self, user_id: str, password_hash: str) -> int:
        """Store a new password digest and bump the token version.

        The version is incremented inside the UPDATE statement, so two
        concurrent changes cannot both land on the same value.

        Returns:
            Rows updated; 0 if the user has been deleted meanwhile.
        """
        result = await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash, token_version=UserModel.token_version + 1)
        )
        await self.session.flush()
        return result.rowcount

    async def replace_password_hash(self, user_id: str, password_hash: str) -> None:
        """Swap in a fresh digest of the same password, keeping the token version."""
        await self.session.execute(
            update(UserModel).where(UserModel.id == user_id).values(password_hash=password_hash)
        )
        await self.session.flush()
