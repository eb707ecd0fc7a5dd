"""Permission gate.

Decides whether a principal may use a capability. Pure function of the
principal's resolved role; no I/O and no caching.
"""

from shopcore.domain.entities import Capability, Principal
from shopcore.domain.exceptions import (
    NoRoleError,
    PermissionDeniedError,
    UnauthenticatedError,
)


def check_permission(principal: Principal | None, capability: Capability | str) -> None:
    """Allow the call or raise the matching denial.

    Args:
        principal: The authenticated principal, or None.
        capability: Capability to check. Strings are parsed into the
            Capability enum, so an unknown name raises ValueError.

    Raises:
        UnauthenticatedError: If no principal is attached.
        NoRoleError: If the principal's role could not be resolved.
        PermissionDeniedError: If the role does not grant the capability.
    """
    capability = Capability.parse(capability)

    if principal is None:
        raise UnauthenticatedError()

    if principal.role is None:
        raise NoRoleError(f"role {principal.role_id} not found for user {principal.id}")

    if not principal.role.allows(capability):
        raise PermissionDeniedError(
            f"role {principal.role.name} lacks {capability.value}"
        )

