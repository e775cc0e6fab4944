"""Errors raised while resolving a catalog request.

Each error carries an HTTP-style status code so transport layers can map it
directly onto a response without inspecting the type.
"""

from __future__ import annotations


DOCUMENTATION_URL = "https://github.com/jsdelivr/api"


class ApiError(Exception):
    """Base error for catalog API requests."""

    status: int = 500

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def to_dict(self) -> dict[str, int | str]:
        return {"status": self.status, "message": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class InvalidActionError(ApiError):
    """Raised when the dispatcher receives an action it does not know."""

    status = 501

    def __init__(self, action: object) -> None:
        super().__init__(f"Invalid action {action} request of api.v2")
        self.action = action


class MissingQueryError(ApiError):
    """Raised when a single-record lookup has neither a name nor filters."""

    status = 404

    def __init__(self) -> None:
        super().__init__(f"A query must be specified. Refer to our documentation at {DOCUMENTATION_URL}")


class RecordNotFoundError(ApiError):
    status = 404

    def __init__(self) -> None:
        super().__init__("Requested project not found.")


class VersionNotFoundError(ApiError):
    """Raised when the record exists but carries no asset for the version."""

    status = 404

    def __init__(self, version: str) -> None:
        super().__init__("Requested version not found.")
        self.version = version
