"""Commands package.

Handlers live in ``gator.commands.handlers``; import ``build_router`` from
there.
"""

from gator.commands.router import Command, CommandRouter, Handler, State

__all__ = [
    "Command",
    "CommandRouter",
    "Handler",
    "State",
]
