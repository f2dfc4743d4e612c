"""Records stored in and returned by the database."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class User:
    """A registered user."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    name: str


@dataclass(frozen=True)
class Feed:
    """An RSS feed added by a user."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    last_fetched_at: datetime | None
    name: str
    url: str
    user_id: UUID


@dataclass(frozen=True)
class FeedFollow:
    """A user following a feed."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    user_id: UUID
    feed_id: UUID


@dataclass(frozen=True)
class Post:
    """An item collected from a feed."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    title: str
    url: str
    description: str | None
    published_at: datetime | None
    feed_id: UUID


@dataclass(frozen=True)
class FeedFollowRow:
    """A feed follow together with the names of its feed and user."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    user_id: UUID
    feed_id: UUID
    feed_name: str
    user_name: str


@dataclass(frozen=True)
class PostRow:
    """A post together with the name of the feed it came from."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    title: str
    url: str
    description: str | None
    published_at: datetime | None
    feed_id: UUID
    feed_name: str