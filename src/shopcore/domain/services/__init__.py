"""Domain services for ShopCore.

Services contain business logic that doesn't naturally fit within a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from shopcore.domain.services.login_throttle import LoginThrottle
from shopcore.domain.services.password_validator import (
    PasswordValidationError,
    PasswordValidator,
    default_password_validator,
)
from shopcore.domain.services.permission_gate import check_permission

__all__ = [
    "LoginThrottle",
    "PasswordValidationError",
    "PasswordValidator",
    "check_permission",
    "default_password_validator",
]
