"""Command registry, program state and the logged-in wrapper."""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .config import Config
from .database import DatabaseError, Queries
from .models import User


class CommandError(Exception):
    """A command could not be carried out."""


@dataclass
class Command:
    """A command name and its arguments."""

    name: str
    args: list[str] = field(default_factory=list)


@dataclass
class State:
    """What every command handler works with."""

    db: Queries
    cfg: Config


Handler = Callable[[State, Command], Any]


class Commands:
    """Registered command handlers by name."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, name: str, handler: Handler) -> None:
        """Register ``handler`` under ``name``."""
        self._handlers[name] = handler

    def run(self, state: State, cmd: Command) -> None:
        """Run the handler registered for ``cmd``."""
        handler = self._handlers.get(cmd.name)
        if handler is None:
            raise CommandError(f"the command {cmd.name} isn't registered")
        handler(state, cmd)


def logged_in(handler: Callable[[State, Command, User], Any]) -> Handler:
    """Wrap a handler so it receives the current user."""

    @functools.wraps(handler)
    def wrapper(state: State, cmd: Command) -> Any:
        name = state.cfg.current_user_name
        try:
            user = state.db.get_user(name)
        except DatabaseError as exc:
            raise CommandError(f"failed to get user - {name} : {exc}") from exc
        return handler(state, cmd, user)

    return wrapper