"""Enumerations used by the authorization flow.

``AuthState`` tracks where a ``StravaAuth`` instance is in the OAuth
authorization-code exchange; terminal states are ``TOKEN_EXCHANGED`` and
``ABORTED``.
"""
from enum import Enum, auto


class AuthState(Enum):
    """States of the OAuth authorization-code flow."""
    START = auto()
    URL_BUILT = auto()
    AWAITING_REDIRECT = auto()
    CODE_EXTRACTED = auto()
    TOKEN_EXCHANGED = auto()
    ABORTED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (AuthState.TOKEN_EXCHANGED, AuthState.ABORTED)
