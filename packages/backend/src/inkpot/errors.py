"""Domain error taxonomy.

Services and the auth pipeline raise these; the handlers registered in
main.create_app() turn them into JSON responses. Nothing below the HTTP
layer knows about status codes except through these classes.
"""

from typing import Optional


class InkpotError(Exception):
    """Base class. Carries the HTTP status and a client-safe message."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidInput(InkpotError):
    """Request body failed shape validation. Lists every field error."""

    status_code = 400
    message = "Invalid input."

    def __init__(self, errors: list[dict], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)


class InvalidIdentifier(InkpotError):
    status_code = 400
    message = "Invalid blog ID."


class NoToken(InkpotError):
    status_code = 401
    message = "Access denied. No token provided."


class InvalidToken(InkpotError):
    # Same status as NoToken: both mean "not authenticated".
    status_code = 401
    message = "Invalid token."


class InvalidCredentials(InkpotError):
    status_code = 400
    message = "Invalid email or password."


class DuplicateEmail(InkpotError):
    status_code = 400
    message = "Email already registered."


class NotFoundOrForbidden(InkpotError):
    """No record matches both the id and the requester.

    Missing and not-owned are reported identically so callers cannot
    probe for other users' records.
    """

    status_code = 404
    message = "Blog not found or not authorized."


class InternalFault(InkpotError):
    status_code = 500
    message = "Internal server error"
