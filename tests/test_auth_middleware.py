"""Tests for the login middleware."""

from unittest.mock import AsyncMock

import pytest

from gator.auth.exceptions import (
    AuthenticationError,
    NotLoggedInError,
    UnknownSessionUserError,
)
from gator.auth.middleware import require_login
from gator.commands.router import Command


@pytest.mark.asyncio
async def test_no_session_never_calls_handler(state):
    inner = AsyncMock()
    handler = require_login(inner)

    with pytest.raises(AuthenticationError):
        await handler(state, Command("browse"))

    inner.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_session_name_is_not_logged_in(state):
    state.session.set_user("")
    inner = AsyncMock()

    with pytest.raises(NotLoggedInError):
        await require_login(inner)(state, Command("browse"))

    inner.assert_not_awaited()


@pytest.mark.asyncio
async def test_session_for_missing_user(state):
    state.session.set_user("ghost")
    inner = AsyncMock()

    with pytest.raises(UnknownSessionUserError) as exc_info:
        await require_login(inner)(state, Command("browse"))

    assert exc_info.value.username == "ghost"
    inner.assert_not_awaited()


@pytest.mark.asyncio
async def test_resolved_user_is_passed_to_handler(state, make_user):
    alice = await make_user("alice")
    state.session.set_user("alice")
    inner = AsyncMock()
    command = Command("browse", ["5"])

    await require_login(inner)(state, command)

    inner.assert_awaited_once_with(state, command, alice)
