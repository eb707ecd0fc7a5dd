"""SQLAlchemy model for the roles table.

A role is one of the fixed tiers and carries one boolean column per
capability.
"""

from collections.abc import Iterable

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from shopcore.domain.entities import Capability, RoleGrant
from shopcore.infrastructure.persistence.database import Base


class RoleModel(Base):
    """SQLAlchemy model for the roles table.

    Attributes:
        id: Auto-incrementing primary key.
        name: Unique tier name (ADMIN, PREMIUM, USER, BAN).
        can_*: One flag per Capability, named after the capability value.
    """

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
        comment="Role tier name",
    )
    can_post_login: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_get_my_user: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_get_users: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_post_products: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_upload_images: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_get_bestsellers: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @classmethod
    def from_capabilities(cls, name: str, capabilities: Iterable[Capability]) -> "RoleModel":
        """Build a role with exactly the given flags set."""
        granted = set(capabilities)
        return cls(name=name, **{c.value: c in granted for c in Capability})

    def grant(self) -> RoleGrant:
        """Convert to the domain RoleGrant."""
        return RoleGrant(
            id=self.id,
            name=self.name,
            capabilities=frozenset(c for c in Capability if getattr(self, c.value)),
        )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"
