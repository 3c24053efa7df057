"""Exception hierarchy for the Strava distance client.

Errors fall into three families: bad user input, security failures in the
OAuth flow, and failures reported by (or talking to) the provider. The CLI
catches ``StravaDistanceError`` at the top level and exits non-zero.
"""
from __future__ import annotations


class StravaDistanceError(Exception):
    """Base exception for all strava-distance errors."""


class InputError(StravaDistanceError):
    """Raised for invalid user-supplied input."""


class InvalidDate(InputError):
    """Raised when a date string is not a valid ``YYYY-MM-DD`` date."""


class NoActivityTypesSpecified(InputError):
    """Raised when an activity type list resolves to nothing."""


class ConfigurationError(InputError):
    """Raised for missing or malformed configuration values."""


class SecurityError(StravaDistanceError):
    """Raised when a security check in the OAuth flow fails."""


class StateMismatch(SecurityError):
    """The ``state`` echoed in the redirect does not match the one we sent."""

    def __init__(self, expected: str, received: str) -> None:
        super().__init__("OAuth state mismatch: possible CSRF attempt, aborting")
        self.expected = expected
        self.received = received


class AuthFlowError(StravaDistanceError):
    """Raised when authorization steps are invoked out of order."""


class ProviderError(StravaDistanceError):
    """Raised for failures reported by Strava or while talking to it.

    ``status_code`` and ``details`` carry the HTTP status and the raw response
    body when they are available so the user can diagnose the problem.
    """

    def __init__(self, message: str, status_code: int | None = None, details: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    def __str__(self) -> str:
        msg = super().__str__()
        if self.status_code is not None:
            msg = f"{msg} (HTTP {self.status_code})"
        if self.details:
            msg = f"{msg}: {self.details}"
        return msg


class AuthorizationDenied(ProviderError):
    """The user declined consent; the redirect carries an ``error`` parameter."""

    def __init__(self, error: str) -> None:
        super().__init__("Authorization denied by Strava", details=error)


class MissingCode(ProviderError):
    """The redirect URL carries no ``code`` parameter."""

    def __init__(self) -> None:
        super().__init__("No authorization code found in the redirect URL")


class TokenExchangeFailed(ProviderError):
    """The token endpoint answered with a non-success status."""


class ApiError(ProviderError):
    """The activities endpoint answered with a non-success status."""


class MalformedResponse(ProviderError):
    """A response body could not be deserialized into the expected shape."""


class NetworkError(ProviderError):
    """The request never produced an HTTP response (connection error, timeout)."""
