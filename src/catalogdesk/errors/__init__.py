"""Custom exception hierarchy for CatalogDesk."""

from __future__ import annotations

from typing import Any, Optional


class CatalogError(Exception):
    """Base class for all custom errors raised by CatalogDesk."""


# --- Resource client errors ---

class ResourceClientError(CatalogError):
    """Uniform failure raised by every resource client call.

    ``cause`` keeps the underlying transport or decoding exception so that
    callers can inspect it without walking ``__cause__``.
    """

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class NetworkError(ResourceClientError):
    """Raised when the remote API is unreachable or the request timed out."""


class ServerError(ResourceClientError):
    """Raised when the remote API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        payload: Any = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.payload = payload


class ValidationError(ServerError):
    """Raised when a mutation payload is rejected as malformed."""


# --- Settings errors ---

class SettingsError(CatalogError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


# --- DI-specific errors ---

class CircularDependencyError(CatalogError):
    """Raised when a circular dependency is detected during resolution."""


class ResolutionError(CatalogError):
    """Raised when a dependency cannot be resolved."""


__all__ = [
    "CatalogError",
    "CircularDependencyError",
    "NetworkError",
    "ResolutionError",
    "ResourceClientError",
    "ServerError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
    "ValidationError",
]
