"""Pydantic schemas for registration, login and password changes."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from shopcore.domain.services import default_password_validator


def _check_password_policy(value: str) -> str:
    errors = default_password_validator.validate(value)
    if errors:
        raise ValueError(errors[0].message)
    return value


class RegisterRequest(BaseModel):
    """Request body for user registration."""

    name: str = Field(..., min_length=2, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="Password (8+ chars, mixed case, digit, symbol)")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return _check_password_policy(v)


class RegisterResponse(BaseModel):
    """Response for a successful registration."""

    id: str
    name: str
    email: str
    message: str = "User registered successfully"


class LoginRequest(BaseModel):
    """Request body for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, description="Password is required")


class LoginUser(BaseModel):
    """User summary returned with a token."""

    id: str
    name: str
    email: str


class LoginResponse(BaseModel):
    """Response for a successful login."""

    token: str
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: LoginUser


class ChangePasswordRequest(BaseModel):
    """Request body for changing the current user's password."""

    old_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return _check_password_policy(v)


class MessageResponse(BaseModel):
    """Generic success message."""

    success: bool = True
    message: str

