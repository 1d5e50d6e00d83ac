"""
Error taxonomy.

Every failure a handler can produce is one of these. Handlers raise them and
the terminal responder in `vidshare.api.errors` turns them into
`{"success": false, "message": ...}` responses with `status_code`.
"""

from __future__ import annotations


class VidshareError(Exception):
    """Base class for errors that map to a documented HTTP status."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# =============================================================================
# Authentication
# =============================================================================


class AuthenticationError(VidshareError):
    """The request could not be tied to an identity."""
    status_code = 401
    default_message = "Authentication failed."


class MissingCredential(AuthenticationError):
    default_message = "Please provide a token or authenticate."


class MalformedCredential(AuthenticationError):
    status_code = 400
    default_message = "Invalid token format."


class TokenInvalid(AuthenticationError):
    default_message = "Invalid token."


class TokenExpired(AuthenticationError):
    default_message = "Token has expired."


class InvalidCredentials(AuthenticationError):
    """Wrong password at login."""
    status_code = 400
    default_message = "Your password is not correct."


# =============================================================================
# Authorization / domain rules
# =============================================================================


class OwnershipViolation(VidshareError):
    status_code = 403
    default_message = "You are not allowed to modify this resource."


class SelfSubscriptionError(VidshareError):
    status_code = 400
    default_message = "You cannot subscribe to yourself."


class NotFound(VidshareError):
    status_code = 404
    default_message = "The resource you are looking for could not be found."


class ValidationError(VidshareError):
    status_code = 400
    default_message = "Invalid input."


# =============================================================================
# Server faults
# =============================================================================


class HashingError(VidshareError):
    default_message = "Password could not be hashed."


class PersistenceError(VidshareError):
    default_message = "Storage is unavailable."


class DuplicateKeyError(PersistenceError):
    """A unique field collided with an existing document."""
    status_code = 400
    default_message = "Duplicate Key Found: Check Your Input"
