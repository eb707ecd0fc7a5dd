"""Password policy shared by registration and password changes.

A password must be at least 8 characters and mix upper case, lower case,
digits and at least one character that is neither a letter nor a digit.
Rules are checked in that order and every violation is reported, so the API
can return the first message while tests can inspect all of them.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PasswordValidationError:
    """A single password policy violation.

    Attributes:
        field: Request field the password came from.
        message: Human-readable message returned to the caller.
        code: Stable machine-readable code.
    """

    field: str
    message: str
    code: str


@dataclass(frozen=True)
class _PatternRule:
    code: str
    message: str
    pattern: re.Pattern[str]


_UPPERCASE = _PatternRule(
    "password_no_uppercase",
    "Password must contain at least one uppercase letter",
    re.compile(r"[A-Z]"),
)
_LOWERCASE = _PatternRule(
    "password_no_lowercase",
    "Password must contain at least one lowercase letter",
    re.compile(r"[a-z]"),
)
_DIGIT = _PatternRule(
    "password_no_digit",
    "Password must contain at least one number",
    re.compile(r"[0-9]"),
)
_SPECIAL = _PatternRule(
    "password_no_special",
    "Password must contain at least one special character",
    re.compile(r"[^A-Za-z0-9]"),
)


class PasswordValidator:
    """Checks passwords against a configurable policy."""

    def __init__(
        self,
        min_length: int = 8,
        require_uppercase: bool = True,
        require_lowercase: bool = True,
        require_digit: bool = True,
        require_special: bool = True,
    ) -> None:
        self.min_length = min_length
        enabled = (
            (require_uppercase, _UPPERCASE),
            (require_lowercase, _LOWERCASE),
            (require_digit, _DIGIT),
            (require_special, _SPECIAL),
        )
        self._rules = tuple(rule for required, rule in enabled if required)

    def validate(self, password: str, field: str = "password") -> list[PasswordValidationError]:
        """Return every rule the password breaks, in policy order.

        Args:
            password: Candidate password.
            field: Field name reported in the errors.

        Returns:
            An empty list when the password is acceptable.
        """
        errors = []
        if len(password) < self.min_length:
            errors.append(
                PasswordValidationError(
                    field=field,
                    message=f"Password must be at least {self.min_length} characters",
                    code="password_too_short",
                )
            )
        errors.extend(
            PasswordValidationError(field=field, message=rule.message, code=rule.code)
            for rule in self._rules
            if not rule.pattern.search(password)
        )
        return errors

    def is_valid(self, password: str) -> bool:
        return not self.validate(password)


default_password_validator = PasswordValidator()
