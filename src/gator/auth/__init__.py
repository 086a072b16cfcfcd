"""Session-based authorization for gated commands."""

from gator.auth.exceptions import (
    AuthenticationError,
    NotLoggedInError,
    UnknownSessionUserError,
)
from gator.auth.middleware import require_login, resolve_current_user

__all__ = [
    "AuthenticationError",
    "NotLoggedInError",
    "UnknownSessionUserError",
    "require_login",
    "resolve_current_user",
]
