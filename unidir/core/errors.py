"""Error taxonomy for the directory API.

Every error carries the HTTP status it maps to and a human-readable
message. The transport layer turns them into ``{"message": ...}`` bodies.
"""

from typing import Any


class DirectoryError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, Any]:
        """Render the JSON body for this error."""
        return {"message": self.message}


class ValidationError(DirectoryError):
    """Malformed or missing input."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid input",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        if self.errors:
            body["errors"] = self.errors
        return body


class AuthError(DirectoryError):
    """Missing, invalid or revoked token, or unknown principal."""

    status_code = 401


class NotAllowedError(DirectoryError):
    """Unsupported method for a route."""

    status_code = 405

    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(message)


class NotFoundError(DirectoryError):
    """Unmatched route."""

    status_code = 404

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class StoreError(DirectoryError):
    """Persistence failure. The store's message is passed through."""

    status_code = 500

    def to_body(self) -> dict[str, Any]:
        return {"message": f"Error: {self.message}"}
