"""Handlers for following and unfollowing feeds."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from .commands import Command, CommandError, State
from .database import DatabaseError
from .models import Feed, User


def _feed_by_url(state: State, url: str) -> Feed:
    try:
        return state.db.get_feed_by_url(url)
    except DatabaseError as exc:
        raise CommandError(f"failed to select feed by url: {exc}") from exc


def handler_follow(state: State, cmd: Command, user: User) -> None:
    """Make the current user follow the feed with the given URL."""
    if len(cmd.args) != 1:
        raise CommandError(f"usage: {cmd.name} <feed_url>")
    feed = _feed_by_url(state, cmd.args[0])
    now = datetime.now(timezone.utc)
    try:
        follow = state.db.create_feed_follow(uuid4(), now, now, user.id, feed.id)
    except DatabaseError as exc:
        raise CommandError(f"failed to insert feed follow: {exc}") from exc
    print(follow.feed_name, follow.user_name)


def handler_list_feed_follows(state: State, cmd: Command, user: User) -> None:
    """Print the names of the feeds the current user follows."""
    try:
        follows = state.db.get_feed_follows_for_user(user.id)
    except DatabaseError as exc:
        raise CommandError(
            f"failed to get feeds for user - {state.cfg.current_user_name} : {exc}"
        ) from exc
    if not follows:
        print("No feeds found.")
        return
    for follow in follows:
        print(follow.feed_name)


def handler_unfollow(state: State, cmd: Command, user: User) -> None:
    """Stop the current user following the feed with the given URL."""
    if len(cmd.args) != 1:
        raise CommandError(f"usage: {cmd.name} <feed_url>")
    feed = _feed_by_url(state, cmd.args[0])
    try:
        removed = state.db.remove_feed_follow_for_user(user.id, feed.id)
    except DatabaseError as exc:
        raise CommandError(f"failed to delete feed follow: {exc}") from exc
    if removed == 0:
        raise CommandError(f"user {user.name} doesn't follow this feed: {feed.name}")
    print(f"User {user.name} successfully unfollowed feed {feed.name}")