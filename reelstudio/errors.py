"""Domain exceptions for studio actions, HTTP mapping, and CLI diagnostics."""

from __future__ import annotations


class StudioStageError(RuntimeError):
    """Raised when a specific command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class ActionError(RuntimeError):
    """Base class for user-facing action failures with an HTTP status code."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ActionError):
    """Raised when request fields are missing or malformed."""

    status_code = 400


class UnauthorizedError(ActionError):
    """Raised when an action requires a signed-in user."""

    status_code = 401


class ForbiddenError(ActionError):
    """Raised when a signed-in user targets a resource outside their scope."""

    status_code = 403


class NotFoundError(ActionError):
    """Raised when a record is missing or not owned by the acting user."""

    status_code = 404


class PersistenceError(ActionError):
    """Raised when a record or object cannot be written."""

    status_code = 500
