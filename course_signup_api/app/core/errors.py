"""
Error taxonomy shared by the service layer.

Services raise these exceptions; endpoint handlers translate them
into ``HTTPException`` with the status code carried by the class.
``ServiceError`` derives from ``ValueError`` so callers that only care
about "bad request of some kind" can keep catching ``ValueError``.
"""

from typing import Any, Dict, Optional


class ServiceError(ValueError):
    """Base class for expected, caller-visible failures."""

    status_code = 400

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        # Additional keys echoed in the error body, e.g. ``signedUpMembers``.
        self.extra: Dict[str, Any] = extra

    def to_body(self) -> Dict[str, Any]:
        """Return the JSON error body for this failure."""
        body: Dict[str, Any] = {"error": self.message}
        body.update(self.extra)
        return body


class InvalidInput(ServiceError):
    """Missing, malformed or out-of-range input, or a violated business rule."""

    status_code = 400


class Conflict(ServiceError):
    """A record with the same unique key already exists."""

    status_code = 409


class NotFound(ServiceError):
    """A referenced record does not exist."""

    status_code = 404


class StorageError(RuntimeError):
    """Reading or writing a JSON document failed.

    Not a ``ServiceError``: it surfaces as a generic 500 response.
    """

    def __init__(self, message: str, original: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.original = original
