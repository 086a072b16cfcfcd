"""Authentication-specific exceptions.

Extends the Gator exception hierarchy for session errors.
"""

from gator.exceptions import GatorError


class AuthenticationError(GatorError):
    """Raised when a gated command runs without a valid session."""

    pass


class NotLoggedInError(AuthenticationError):
    """Raised when no user is logged in."""

    def __init__(self) -> None:
        super().__init__("Not logged in. Run 'register <name>' or 'login <name>' first")


class UnknownSessionUserError(AuthenticationError):
    """Raised when the session names a user that does not exist.

    Attributes:
        username: The name stored in the session.
    """

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Logged in as {username!r}, but that user does not exist")
