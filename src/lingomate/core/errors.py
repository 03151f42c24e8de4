"""Error hierarchy: typed exceptions for every LingoMate failure mode.

Every error carries a stable ``code`` and the HTTP status the API layer
answers with. Families:

    AuthError    -> 401, never retried
    GraphError   -> client-input rejections (400/403/404/409)
    StoreError   -> credential store lookups and uniqueness
    AccountError -> signup/login/onboarding input problems
    BridgeError  -> chat provider problems (503 at runtime, fatal at startup)

Messages are safe to show to clients; nothing internal leaks through them.
"""

from typing import Any


class LingoMateError(Exception):
    """Base exception for all LingoMate errors."""

    code = "INTERNAL_ERROR"
    http_status = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return {"error": body}


class ConfigurationError(LingoMateError):
    """Required process configuration is absent; raised at startup only."""

    code = "MISCONFIGURED"
    default_message = "Service is misconfigured"


# ─── Authentication (401) ──────────────────────────────────────


class AuthError(LingoMateError):
    code = "UNAUTHORIZED"
    http_status = 401
    default_message = "Unauthorized"


class MissingCredential(AuthError):
    code = "MISSING_CREDENTIAL"
    default_message = "Unauthorized - No token provided"


class InvalidSignature(AuthError):
    code = "INVALID_SIGNATURE"
    default_message = "Unauthorized - Invalid token"


class Expired(AuthError):
    code = "TOKEN_EXPIRED"
    default_message = "Unauthorized - Token has expired"


class IdentityNotFound(AuthError):
    code = "IDENTITY_NOT_FOUND"
    default_message = "Unauthorized - User not found"


class InvalidCredentials(AuthError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class MisconfiguredSession(ConfigurationError):
    code = "MISCONFIGURED_SESSION"
    default_message = "Session signing secret is not configured"


# ─── Credential store ──────────────────────────────────────────


class StoreError(LingoMateError):
    code = "STORE_ERROR"


class NotFound(StoreError):
    code = "NOT_FOUND"
    http_status = 404
    default_message = "Record not found"


class DuplicateKey(StoreError):
    code = "DUPLICATE_KEY"
    http_status = 409
    default_message = "Record already exists"


# ─── Friend graph ──────────────────────────────────────────────


class GraphError(LingoMateError):
    code = "GRAPH_ERROR"
    http_status = 400


class SelfRequest(GraphError):
    code = "SELF_REQUEST"
    default_message = "You can't send a friend request to yourself"


class EdgeExists(GraphError):
    code = "EDGE_EXISTS"
    http_status = 409
    default_message = "A friend request or friendship already exists between these users"


class EdgeNotFound(GraphError):
    code = "REQUEST_NOT_FOUND"
    http_status = 404
    default_message = "Friend request not found"


class NotRecipient(GraphError):
    code = "NOT_RECIPIENT"
    http_status = 403
    default_message = "You are not authorized to accept this request"


class AlreadyAccepted(GraphError):
    code = "ALREADY_ACCEPTED"
    http_status = 409
    default_message = "Friend request already accepted"


class UserNotFound(GraphError):
    code = "USER_NOT_FOUND"
    http_status = 404
    default_message = "User not found"


# ─── Accounts ──────────────────────────────────────────────────


class AccountError(LingoMateError):
    code = "INVALID_INPUT"
    http_status = 400
    default_message = "Invalid input"


class MissingFields(AccountError):
    code = "MISSING_FIELDS"
    default_message = "All fields are required"

    def __init__(self, missing: list[str]):
        super().__init__(missing_fields=missing)


class WeakPassword(AccountError):
    code = "WEAK_PASSWORD"


class InvalidEmail(AccountError):
    code = "INVALID_EMAIL"
    default_message = "Invalid email format"


class EmailTaken(AccountError):
    code = "EMAIL_TAKEN"
    http_status = 409
    default_message = "Email already exists, please use a different one"


# ─── Chat bridge ───────────────────────────────────────────────


class BridgeError(LingoMateError):
    code = "BRIDGE_ERROR"
    http_status = 503


class ProviderUnavailable(BridgeError):
    code = "PROVIDER_UNAVAILABLE"
    default_message = "Chat provider is unavailable"


class MisconfiguredBridge(BridgeError, ConfigurationError):
    code = "MISCONFIGURED_BRIDGE"
    http_status = 500
    default_message = "Chat provider key or secret is missing"
