"""SQLite storage for users, feeds, follows and posts."""

from __future__ import annotations

import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from .models import Feed, FeedFollowRow, Post, PostRow, User

_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    name TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS feeds (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    last_fetched_at TEXT,
    name TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS feed_follows (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    feed_id TEXT NOT NULL REFERENCES feeds(id) ON DELETE CASCADE,
    UNIQUE (user_id, feed_id)
);
CREATE TABLE IF NOT EXISTS posts (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    title TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    description TEXT,
    published_at TEXT,
    feed_id TEXT NOT NULL REFERENCES feeds(id) ON DELETE CASCADE
);
"""

_FEED_COLUMNS = "id, created_at, updated_at, last_fetched_at, name, url, user_id"
_USER_COLUMNS = "id, created_at, updated_at, name"
_POST_COLUMNS = (
    "posts.id, posts.created_at, posts.updated_at, posts.title, posts.url, "
    "posts.description, posts.published_at, posts.feed_id"
)
_FOLLOW_ROW_QUERY = """
SELECT feed_follows.id, feed_follows.created_at, feed_follows.updated_at,
       feed_follows.user_id, feed_follows.feed_id,
       feeds.name, users.name
FROM feed_follows
INNER JOIN feeds ON feeds.id = feed_follows.feed_id
INNER JOIN users ON users.id = feed_follows.user_id
"""


class DatabaseError(Exception):
    """A query failed."""


class NoRowsError(DatabaseError):
    """A query that must return a row returned none."""


class UniqueViolationError(DatabaseError):
    """An insert would duplicate a unique value."""


def _encode_time(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(_TIME_FORMAT)


def _decode_time(text: str | None) -> datetime | None:
    if text is None:
        return None
    return datetime.strptime(text, _TIME_FORMAT).replace(tzinfo=timezone.utc)


def _user(row: tuple) -> User:
    return User(UUID(row[0]), _decode_time(row[1]), _decode_time(row[2]), row[3])


def _feed(row: tuple) -> Feed:
    return Feed(
        id=UUID(row[0]),
        created_at=_decode_time(row[1]),
        updated_at=_decode_time(row[2]),
        last_fetched_at=_decode_time(row[3]),
        name=row[4],
        url=row[5],
        user_id=UUID(row[6]),
    )


def _post(row: tuple) -> Post:
    return Post(
        id=UUID(row[0]),
        created_at=_decode_time(row[1]),
        updated_at=_decode_time(row[2]),
        title=row[3],
        url=row[4],
        description=row[5],
        published_at=_decode_time(row[6]),
        feed_id=UUID(row[7]),
    )


def _post_row(row: tuple) -> PostRow:
    post = _post(row)
    return PostRow(**{**post.__dict__, "feed_name": row[8]})


def _follow_row(row: tuple) -> FeedFollowRow:
    return FeedFollowRow(
        id=UUID(row[0]),
        created_at=_decode_time(row[1]),
        updated_at=_decode_time(row[2]),
        user_id=UUID(row[3]),
        feed_id=UUID(row[4]),
        feed_name=row[5],
        user_name=row[6],
    )


@contextmanager
def _translated() -> Iterator[None]:
    try:
        yield
    except sqlite3.IntegrityError as exc:
        if "UNIQUE constraint failed" in str(exc):
            raise UniqueViolationError(
                f"duplicate key value violates unique constraint: {exc}"
            ) from exc
        raise DatabaseError(str(exc)) from exc
    except sqlite3.Error as exc:
        raise DatabaseError(str(exc)) from exc


class Queries:
    """The queries the application runs against its database."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection
        with _translated():
            self._conn.execute("PRAGMA foreign_keys = ON")

    def __enter__(self) -> Queries:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def create_schema(self) -> None:
        """Create the tables if they do not exist yet."""
        with _translated():
            self._conn.executescript(_SCHEMA)

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    def _one(self, sql: str, params: tuple[Any, ...] = ()) -> tuple:
        with _translated():
            row = self._conn.execute(sql, params).fetchone()
        if row is None:
            raise NoRowsError("no rows in result set")
        return row

    def _many(self, sql: str, params: tuple[Any, ...] = ()) -> list[tuple]:
        with _translated():
            return self._conn.execute(sql, params).fetchall()

    def _write(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        with _translated(), self._conn:
            return self._conn.execute(sql, params).rowcount

    # feed follows

    def create_feed_follow(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        user_id: UUID,
        feed_id: UUID,
    ) -> FeedFollowRow:
        """Record that a user follows a feed and return it with both names."""
        self._write(
            "INSERT INTO feed_follows (id, created_at, updated_at, user_id, feed_id) "
            "VALUES (?, ?, ?, ?, ?)",
            (str(id), _encode_time(created_at), _encode_time(updated_at),
             str(user_id), str(feed_id)),
        )
        row = self._one(_FOLLOW_ROW_QUERY + "WHERE feed_follows.id = ?", (str(id),))
        return _follow_row(row)

    def get_feed_follows_for_user(self, user_id: UUID) -> list[FeedFollowRow]:
        """Return every feed the user follows."""
        rows = self._many(
            _FOLLOW_ROW_QUERY + "WHERE feed_follows.user_id = ?", (str(user_id),)
        )
        return [_follow_row(row) for row in rows]

    def remove_feed_follow_for_user(self, user_id: UUID, feed_id: UUID) -> int:
        """Stop a user following a feed; return how many follows were removed."""
        return self._write(
            "DELETE FROM feed_follows WHERE user_id = ? AND feed_id = ?",
            (str(user_id), str(feed_id)),
        )

    # feeds

    def create_feed(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        name: str,
        url: str,
        user_id: UUID,
    ) -> Feed:
        """Add a feed and return it."""
        self._write(
            "INSERT INTO feeds (id, created_at, updated_at, name, url, user_id) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (str(id), _encode_time(created_at), _encode_time(updated_at),
             name, url, str(user_id)),
        )
        return self._feed_by_id(id)

    def _feed_by_id(self, id: UUID) -> Feed:
        return _feed(self._one(f"SELECT {_FEED_COLUMNS} FROM feeds WHERE id = ?", (str(id),)))

    def get_feed_by_url(self, url: str) -> Feed:
        """Return the feed with this URL."""
        return _feed(self._one(f"SELECT {_FEED_COLUMNS} FROM feeds WHERE url = ?", (url,)))

    def get_feeds(self) -> list[Feed]:
        """Return all feeds."""
        return [_feed(row) for row in self._many(f"SELECT {_FEED_COLUMNS} FROM feeds")]

    def get_next_feed_to_fetch(self) -> Feed:
        """Return the feed fetched longest ago, never-fetched feeds first."""
        row = self._one(
            f"SELECT {_FEED_COLUMNS} FROM feeds "
            "ORDER BY last_fetched_at IS NOT NULL, last_fetched_at ASC LIMIT 1"
        )
        return _feed(row)

    def mark_feed_fetched(self, id: UUID) -> Feed:
        """Set the feed's fetch and update times to now and return it."""
        now = _encode_time(datetime.now(timezone.utc))
        changed = self._write(
            "UPDATE feeds SET last_fetched_at = ?, updated_at = ? WHERE id = ?",
            (now, now, str(id)),
        )
        if changed == 0:
            raise NoRowsError("no rows in result set")
        return self._feed_by_id(id)

    # posts

    def create_post(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        title: str,
        url: str,
        description: str | None,
        published_at: datetime | None,
        feed_id: UUID,
    ) -> Post:
        """Store a post and return it."""
        self._write(
            "INSERT INTO posts (id, created_at, updated_at, title, url, description, "
            "published_at, feed_id) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (str(id), _encode_time(created_at), _encode_time(updated_at), title, url,
             description, _encode_time(published_at), str(feed_id)),
        )
        row = self._one(f"SELECT {_POST_COLUMNS} FROM posts WHERE id = ?", (str(id),))
        return _post(row)

    def get_posts_for_user(self, user_id: UUID, limit: int) -> list[PostRow]:
        """Return the newest posts of the feeds a user follows."""
        if limit < 0:
            raise DatabaseError("LIMIT must not be negative")
        rows = self._many(
            f"SELECT {_POST_COLUMNS}, feeds.name FROM posts "
            "JOIN feed_follows ON posts.feed_id = feed_follows.feed_id "
            "JOIN feeds ON feeds.id = posts.feed_id "
            "WHERE feed_follows.user_id = ? "
            "ORDER BY posts.published_at IS NULL, posts.published_at DESC "
            "LIMIT ?",
            (str(user_id), limit),
        )
        return [_post_row(row) for row in rows]

    # users

    def create_user(
        self, id: UUID, created_at: datetime, updated_at: datetime, name: str
    ) -> User:
        """Register a user and return it."""
        self._write(
            "INSERT INTO users (id, created_at, updated_at, name) VALUES (?, ?, ?, ?)",
            (str(id), _encode_time(created_at), _encode_time(updated_at), name),
        )
        return _user(self._one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (str(id),)))

    def delete_data(self) -> None:
        """Delete every user, and with them all feeds, follows and posts."""
        self._write("DELETE FROM users")

    def get_user(self, name: str) -> User:
        """Return the user with this name."""
        return _user(self._one(f"SELECT {_USER_COLUMNS} FROM users WHERE name = ?", (name,)))

    def get_username(self, id: UUID) -> str:
        """Return the name of the user with this id."""
        return self._one("SELECT name FROM users WHERE id = ?", (str(id),))[0]

    def get_users(self) -> list[User]:
        """Return all users."""
        return [_user(row) for row in self._many(f"SELECT {_USER_COLUMNS} FROM users")]


def connect(url: str | os.PathLike[str]) -> Queries:
    """Open the database named by ``url`` and make sure its tables exist.

    Accepts ``sqlite://`` (in memory), ``sqlite:///path``, ``:memory:`` or a
    plain file path.
    """
    text = os.fspath(url)
    if text in ("sqlite://", "sqlite:///", ":memory:"):
        target = ":memory:"
    elif text.startswith("sqlite:///"):
        target = text[len("sqlite:///"):]
    elif "://" in text:
        raise DatabaseError(f"unsupported database url: {text}")
    else:
        target = text
    with _translated():
        connection = sqlite3.connect(target)
    queries = Queries(connection)
    queries.create_schema()
    return queries