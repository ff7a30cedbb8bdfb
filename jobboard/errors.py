"""
Error types raised by the job board.

Every failure that crosses a module boundary is a JobBoardError so callers
can isolate a failed request with a single except clause.
"""

from dataclasses import dataclass
from typing import List, Optional


class JobBoardError(Exception):
    """Base class for all job board failures."""
    pass


class ConfigError(JobBoardError):
    """Raised when required connection settings are missing or malformed."""
    pass


@dataclass(frozen=True)
class FieldError:
    """One rejected input field."""

    field: str
    constraint: str  # required, type, min_length, max_length
    message: str


class ValidationError(JobBoardError):
    """Raised when input fails its schema. Never reaches the store."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        summary = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(f"Invalid input: {summary}")

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]


class RemoteServiceError(JobBoardError):
    """Network, availability or permission failure reported by the store."""

    def __init__(self, message: str, status_code: Optional[int] = None, error_type: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_type = error_type


class NotFoundError(RemoteServiceError):
    """Requested row does not exist."""

    def __init__(self, message: str, error_type: Optional[str] = None):
        super().__init__(message, status_code=404, error_type=error_type)


class AuthenticationError(JobBoardError):
    """Raised when the current actor cannot be looked up."""
    pass
