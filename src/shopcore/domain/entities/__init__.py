"""Domain entities for ShopCore.

Entities are pure Python dataclasses and enums that represent core business
concepts. They have no dependencies on infrastructure or external frameworks.
"""

from shopcore.domain.entities.capability import (
    DEFAULT_ROLE_GRANTS,
    Capability,
    RoleTier,
)
from shopcore.domain.entities.principal import AuthMethod, Principal, RoleGrant

__all__ = [
    "AuthMethod",
    "Capability",
    "DEFAULT_ROLE_GRANTS",
    "Principal",
    "RoleGrant",
    "RoleTier",
]
