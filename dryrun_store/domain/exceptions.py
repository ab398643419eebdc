"""Domain-specific exceptions for the dry-run store data access layer."""


class DomainError(Exception):
    """Base exception for all domain-related errors."""

    pass


class AppError(DomainError):
    """Base class for errors that are safe to expose to callers.

    Attributes:
        message: User-facing message
        status_code: HTTP-style status derived from the error kind
        raw: Optional diagnostic text (original engine error) kept for logs only
    """

    status_code = 500

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.message = message
        self.raw = raw

    def to_payload(self) -> dict[str, str]:
        """Return the flat error body rendered to callers."""
        return {"error": self.message}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, raw={self.raw!r})"


class ClientError(AppError):
    """Raised for bad input or a storage constraint violation."""

    status_code = 400


class ServerError(AppError):
    """Raised for unexpected or internal failures."""

    status_code = 500

    def __init__(self, message: str = "Internal server error", raw: str | None = None):
        super().__init__(message, raw)


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    status_code = 404

    def __init__(self, message: str = "Not found", raw: str | None = None):
        super().__init__(message, raw)
