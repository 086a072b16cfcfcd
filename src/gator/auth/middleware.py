"""Login gate for commands that act on behalf of a user."""

from collections.abc import Awaitable, Callable
from functools import wraps

import structlog

from gator.auth.exceptions import NotLoggedInError, UnknownSessionUserError
from gator.commands.router import Command, Handler, State
from gator.exceptions import NotFoundError
from gator.models.user import User

logger = structlog.get_logger()

UserHandler = Callable[[State, Command, User], Awaitable[None]]


async def resolve_current_user(state: State) -> User:
    """Return the logged-in user.

    Raises:
        NotLoggedInError: If no session is set.
        UnknownSessionUserError: If the session names a missing user.
    """
    username = state.session.current_user()
    if not username:
        raise NotLoggedInError()
    try:
        return await state.storage.get_user(username)
    except NotFoundError as e:
        raise UnknownSessionUserError(username) from e


def require_login(handler: UserHandler) -> Handler:
    """Wrap ``handler`` so it runs only with a resolved user.

    The wrapped handler is not called at all when authentication fails.
    """

    @wraps(handler)
    async def wrapper(state: State, command: Command) -> None:
        user = await resolve_current_user(state)
        logger.debug("Session resolved", user=user.name, command=command.name)
        await handler(state, command, user)

    return wrapper
