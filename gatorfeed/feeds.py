"""Handlers for adding and listing feeds."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from .commands import Command, CommandError, State
from .database import DatabaseError
from .models import Feed, User

SEPARATOR = "====================================="
_ZERO_TIME = "0001-01-01 00:00:00 +0000 UTC"


def _show_time(value: datetime | None) -> str:
    if value is None:
        return _ZERO_TIME
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f +0000 UTC")


def handler_add_feed(state: State, cmd: Command, user: User) -> None:
    """Add a feed and make its creator follow it."""
    if len(cmd.args) != 2:
        raise CommandError(f"usage: {cmd.name} <name> <url>")
    name, url = cmd.args
    now = datetime.now(timezone.utc)
    feed = state.db.create_feed(uuid4(), now, now, name, url, user.id)
    try:
        state.db.create_feed_follow(uuid4(), now, now, feed.user_id, feed.id)
    except DatabaseError as exc:
        raise CommandError(f"failed to insert feed follow: {exc}") from exc
    print(feed)


def handler_list_feeds(state: State, cmd: Command) -> None:
    """Print every feed with the name of the user who added it."""
    try:
        feeds = state.db.get_feeds()
    except DatabaseError as exc:
        raise CommandError(f"couldn't get feeds: {exc}") from exc
    if not feeds:
        print("No feeds found.")
        return
    for number, feed in enumerate(feeds, start=1):
        print(format_feed(number, feed, state.db.get_username(feed.user_id)))
        print(SEPARATOR)


def format_feed(number: int, feed: Feed, username: str) -> str:
    """Describe a feed over several lines."""
    return "\n".join(
        [
            str(number),
            f"* ID:            {feed.id}",
            f"* Created:       {_show_time(feed.created_at)}",
            f"* Updated:       {_show_time(feed.updated_at)}",
            f"* Name:          {feed.name}",
            f"* URL:           {feed.url}",
            f"* User:          {username}",
            f"* LastFetchedAt: {_show_time(feed.last_fetched_at)}",
        ]
    )