"""Capabilities and role tiers.

Capabilities form a closed set. Each one is a boolean column on the roles
table, so a capability name that is not listed here cannot be checked.
"""

from enum import Enum


class Capability(str, Enum):
    """Named boolean permission carried by a role."""

    POST_LOGIN = "can_post_login"
    GET_MY_USER = "can_get_my_user"
    GET_USERS = "can_get_users"
    POST_PRODUCTS = "can_post_products"
    UPLOAD_IMAGES = "can_upload_images"
    GET_BESTSELLERS = "can_get_bestsellers"

    @classmethod
    def parse(cls, name: "str | Capability") -> "Capability":
        """Resolve a capability from its flag name.

        Args:
            name: Flag name such as ``"can_post_products"``, or a Capability.

        Returns:
            The matching Capability.

        Raises:
            ValueError: If the name is not a known capability.
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            known = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown capability '{name}'. Known: {known}") from None


class RoleTier(str, Enum):
    """Fixed role tiers."""

    ADMIN = "ADMIN"
    PREMIUM = "PREMIUM"
    USER = "USER"
    BAN = "BAN"


# Default capability grants per tier
DEFAULT_ROLE_GRANTS: dict[RoleTier, frozenset[Capability]] = {
    RoleTier.ADMIN: frozenset(Capability),
    RoleTier.PREMIUM: frozenset(Capability) - {Capability.GET_USERS},
    RoleTier.USER: frozenset(
        {Capability.POST_LOGIN, Capability.GET_MY_USER, Capability.POST_PRODUCTS}
    ),
    RoleTier.BAN: frozenset(),
}
