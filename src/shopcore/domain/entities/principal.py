"""Principal entity: the authenticated identity for one request.

A Principal is built by the identity resolver, handed to route handlers
through FastAPI dependencies, and discarded when the request completes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from shopcore.domain.entities.capability import Capability


class AuthMethod(str, Enum):
    """How the principal proved its identity."""

    BEARER = "bearer"
    API_KEY = "api_key"


@dataclass(frozen=True)
class RoleGrant:
    """A resolved role and the capabilities it grants.

    Attributes:
        id: Role ID.
        name: Role tier name (e.g. 'ADMIN').
        capabilities: Capabilities whose flag is true on the role.
    """

    id: int
    name: str
    capabilities: frozenset[Capability] = field(default_factory=frozenset)

    def allows(self, capability: Capability) -> bool:
        """Check whether the role grants a capability."""
        return capability in self.capabilities

    def to_dict(self) -> dict[str, Any]:
        """Render as ``{name, <capability flags>}``."""
        data: dict[str, Any] = {"name": self.name}
        for capability in Capability:
            data[capability.value] = capability in self.capabilities
        return data


@dataclass(frozen=True)
class Principal:
    """Authenticated user plus resolved role.

    Attributes:
        id: User ID.
        name: Display name.
        email: Email address.
        role_id: Role the user references.
        role: Resolved role, or None when the role record is missing.
        auth_method: Credential type that authenticated the request.
    """

    id: str
    name: str
    email: str
    role_id: int
    role: RoleGrant | None
    auth_method: AuthMethod

    def to_dict(self) -> dict[str, Any]:
        """Render the outbound principal shape."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role_id": self.role_id,
            "role": self.role.to_dict() if self.role else None,
        }
