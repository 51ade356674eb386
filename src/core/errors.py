from __future__ import annotations


class UploaderError(Exception):
    """Base error for the uploader."""


class ValidationError(UploaderError):
    """Raised when user input is invalid."""


class ConfigurationError(ValidationError):
    """Raised when required upload configuration (token/owner/repo) is missing."""


class NotFoundError(UploaderError):
    """Raised when a requested local target or repository is not found."""


class ExternalServiceError(UploaderError):
    """Raised when an external service (GitHub/relay) fails at transport level."""


class RemoteLookupError(ExternalServiceError):
    """Raised when an existing-content lookup fails for a reason other than absence."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RepositoryNotReadyError(ExternalServiceError):
    """Raised when a freshly created repository does not become queryable in time."""


class LocalReadError(UploaderError):
    """Raised when a queued local entry cannot be read (e.g. an unreadable directory)."""
