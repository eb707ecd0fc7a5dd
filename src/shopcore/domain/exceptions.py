"""Error taxonomy for ShopCore.

Every failure the API reports on purpose is one of these exceptions. Each
carries the HTTP status it maps to and a public message that never reveals
which part of a credential was wrong. The global exception handler in
``shopcore.infrastructure.api.app`` renders them.
"""


class ShopCoreError(Exception):
    """Base exception for all expected ShopCore failures."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        """Initialize the error.

        Args:
            detail: Internal diagnostic detail. Logged, and only returned to
                callers when debug output is enabled outside production.
        """
        super().__init__(detail or self.public_message)
        self.detail = detail

    @property
    def headers(self) -> dict[str, str] | None:
        """Extra response headers for this error."""
        return None


# --- Authentication (401) ---


class AuthenticationError(ShopCoreError):
    """Base class for failures to establish who the caller is."""

    status_code = 401
    public_message = "Could not validate credentials"

    @property
    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": "Bearer"}


class MissingTokenError(AuthenticationError):
    """Authorization header absent or not a Bearer header."""

    public_message = "Missing token"


class InvalidTokenError(AuthenticationError):
    """Token signature, structure or expiry check failed."""

    public_message = "Invalid token"


class StaleTokenError(AuthenticationError):
    """Token version no longer matches the user's current version."""

    public_message = "Token expired"


class UserNotFoundError(AuthenticationError):
    """The token subject no longer exists."""


class MissingAPIKeyError(AuthenticationError):
    """x-api-key header absent."""

    public_message = "API key required in x-api-key header"


class InvalidAPIKeyError(AuthenticationError):
    """No stored key hash matches the presented key."""

    public_message = "Invalid API key"


class AuthenticationRequiredError(AuthenticationError):
    """Neither a bearer token nor an API key was presented."""

    public_message = "Authentication required"
    hint = "Provide either Authorization: Bearer <jwt> or x-api-key: <api_key> header"


class InvalidCredentialsError(AuthenticationError):
    """Login failed. Unknown email and wrong password look the same."""

    public_message = "Invalid credentials"


class OldPasswordIncorrectError(AuthenticationError):
    """The current password supplied with a password change is wrong."""

    public_message = "Old password incorrect"

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class WebhookSignatureError(AuthenticationError):
    """Webhook HMAC missing, wrong, or the shared secret is not configured."""

    public_message = "Invalid signature"

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class MissingWebhookSignatureError(WebhookSignatureError):
    """Webhook arrived without the signature header."""

    public_message = "Missing HMAC signature"


# --- Authorization (401/403) ---


class AuthorizationError(ShopCoreError):
    """Base class for failures to grant an authenticated caller access."""

    status_code = 403
    public_message = "Permission denied"


class UnauthenticatedError(AuthorizationError):
    """Permission check ran without a principal."""

    status_code = 401
    public_message = "Unauthenticated"


class NoRoleError(AuthorizationError):
    """The principal's role record could not be resolved."""

    public_message = "No role assigned"


class PermissionDeniedError(AuthorizationError):
    """The role's capability flag is false or absent."""

    def __init__(self, detail: str | None = None, message: str | None = None) -> None:
        super().__init__(detail)
        if message:
            self.public_message = message


# --- Throttling (429) ---


class RateLimitedError(ShopCoreError):
    """Login retried within the cooldown window."""

    status_code = 429

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        self.public_message = (
            f"Too many login attempts. Please wait {retry_after}s before retry"
        )
        super().__init__()

    @property
    def headers(self) -> dict[str, str] | None:
        return {"Retry-After": str(self.retry_after)}


# --- Upstream (500) ---


class UpstreamDependencyError(ShopCoreError):
    """The credential store or the commerce platform call failed."""

    status_code = 500
    public_message = "Upstream service failure"
