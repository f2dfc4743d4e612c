"""Command-line entry point."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from . import config
from .aggregate import handler_agg
from .browse import handler_browse
from .commands import Command, CommandError, Commands, State, logged_in
from .database import DatabaseError, connect
from .feeds import handler_add_feed, handler_list_feeds
from .follows import handler_follow, handler_list_feed_follows, handler_unfollow
from .users import handler_list_users, handler_login, handler_register, handler_reset


def build_commands() -> Commands:
    """Return the registry of every command the program knows."""
    cmds = Commands()
    cmds.register("login", handler_login)
    cmds.register("register", handler_register)
    cmds.register("reset", handler_reset)
    cmds.register("users", handler_list_users)
    cmds.register("agg", handler_agg)
    cmds.register("addfeed", logged_in(handler_add_feed))
    cmds.register("feeds", handler_list_feeds)
    cmds.register("follow", logged_in(handler_follow))
    cmds.register("following", logged_in(handler_list_feed_follows))
    cmds.register("unfollow", logged_in(handler_unfollow))
    cmds.register("browse", logged_in(handler_browse))
    return cmds


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        cfg = config.read()
    except (OSError, ValueError) as exc:
        print(f"error reading config: {exc}", file=sys.stderr)
        return 1
    if not args:
        print("Usage: cli <commandName> [args...]", file=sys.stderr)
        return 1
    try:
        db = connect(cfg.db_url)
    except DatabaseError as exc:
        print(f"error connecting to database: {exc}", file=sys.stderr)
        return 1
    with db:
        try:
            build_commands().run(State(db=db, cfg=cfg), Command(args[0], args[1:]))
        except (CommandError, DatabaseError, OSError, ValueError) as exc:
            print(exc, file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())