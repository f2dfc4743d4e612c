"""Handler for reading the posts of followed feeds."""

from __future__ import annotations

from datetime import datetime

from .commands import Command, CommandError, State
from .database import DatabaseError
from .models import PostRow, User

DEFAULT_LIMIT = 2
SEPARATOR = "====================================="
_ZERO_DATE = datetime(1, 1, 1)


def format_post(post: PostRow) -> str:
    """Describe a post over four lines."""
    when = post.published_at or _ZERO_DATE
    return "\n".join(
        [
            f"{when:%a %b} {when.day} from {post.feed_name}",
            f"--- {post.title} ---",
            f"    {post.description or ''}",
            f"Link: {post.url}",
        ]
    )


def handler_browse(state: State, cmd: Command, user: User) -> None:
    """Print the newest posts from the feeds the user follows."""
    limit = DEFAULT_LIMIT
    if len(cmd.args) == 1:
        try:
            limit = int(cmd.args[0])
        except ValueError as exc:
            raise CommandError(f"invalid limit: {exc}") from exc
    try:
        posts = state.db.get_posts_for_user(user.id, limit)
    except DatabaseError as exc:
        raise CommandError(f"couldn't get posts for user: {exc}") from exc
    print(f"Found {len(posts)} posts for user {user.name}:")
    for post in posts:
        print(format_post(post))
        print(SEPARATOR)