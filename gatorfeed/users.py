"""Handlers for registering, logging in and listing users."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from .commands import Command, CommandError, State
from .database import DatabaseError, NoRowsError


def handler_login(state: State, cmd: Command) -> None:
    """Make an existing user the current user."""
    if len(cmd.args) != 1:
        raise CommandError("login command requires a single argument: username")
    username = cmd.args[0]
    try:
        state.db.get_user(username)
    except DatabaseError as exc:
        raise CommandError(f"can't login as {username}. user isn't in database") from exc
    state.cfg.set_user(username)
    print(f"Username was successfully set to {username}")


def handler_register(state: State, cmd: Command) -> None:
    """Create a user and make it the current user."""
    if len(cmd.args) != 1:
        raise CommandError("register command requires a single argument: username")
    username = cmd.args[0]
    try:
        state.db.get_user(username)
    except NoRowsError:
        pass
    else:
        raise CommandError(f"User {username} already exists")

    now = datetime.now(timezone.utc)
    try:
        user = state.db.create_user(uuid4(), now, now, username)
    except DatabaseError as exc:
        raise CommandError(f"failed to create user {username}: {exc}") from exc
    state.cfg.set_user(user.name)
    print(f"User {user.name} was created successfully")
    print(user)


def handler_reset(state: State, cmd: Command) -> None:
    """Delete all users and everything that belongs to them."""
    try:
        state.db.delete_data()
    except DatabaseError as exc:
        raise CommandError(f"failed to delete users: {exc}") from exc
    print("All users were deleted successfully.")


def handler_list_users(state: State, cmd: Command) -> None:
    """Print every user, marking the current one."""
    for user in state.db.get_users():
        line = f"* {user.name}"
        if user.name == state.cfg.current_user_name:
            line += " (current)"
        print(line)