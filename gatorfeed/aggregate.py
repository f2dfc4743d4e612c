"""Periodic collection of posts from feeds."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from .commands import Command, CommandError, State
from .database import DatabaseError, Queries, UniqueViolationError
from .models import Feed
from .rss import fetch_feed

log = logging.getLogger(__name__)

_UNIT_SECONDS = {
    "ns": 1e-9, "us": 1e-6, "µs": 1e-6, "μs": 1e-6,
    "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0,
}
_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)"
_UNIT = r"(?:ns|us|µs|μs|ms|h|m|s)"
_DURATION = re.compile(rf"([+-]?)((?:{_NUMBER}{_UNIT})+)")
_PART = re.compile(rf"({_NUMBER})({_UNIT})")
_RFC1123Z = "%a, %d %b %Y %H:%M:%S %z"


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``1m30s``, ``500ms`` or ``-1.5h``."""
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    match = _DURATION.fullmatch(text)
    if match is None:
        raise ValueError(f'time: invalid duration "{text}"')
    seconds = sum(float(num) * _UNIT_SECONDS[unit] for num, unit in _PART.findall(match.group(2)))
    return timedelta(seconds=-seconds if match.group(1) == "-" else seconds)


def parse_pub_date(text: str) -> datetime | None:
    """Parse an RFC 1123 date with numeric zone; return None if it does not parse."""
    try:
        return datetime.strptime(text, _RFC1123Z)
    except ValueError:
        return None


def handler_agg(state: State, cmd: Command) -> None:
    """Scrape the next feed, then again after every interval, forever."""
    if len(cmd.args) != 1:
        raise CommandError(f"usage: {cmd.name} <time_between_reqs>")
    try:
        interval = parse_duration(cmd.args[0])
    except ValueError as exc:
        raise CommandError(f"invalid duration: {exc}") from exc
    if interval <= timedelta(0):
        raise CommandError("invalid duration: interval must be positive")

    log.info("Collecting feeds every %s...", cmd.args[0])
    while True:
        scrape_feeds(state)
        time.sleep(interval.total_seconds())


def scrape_feeds(state: State) -> None:
    """Scrape the feed that was fetched longest ago."""
    try:
        feed = state.db.get_next_feed_to_fetch()
    except DatabaseError as exc:
        log.warning("Couldn't get next feeds to fetch %s", exc)
        return
    log.info("Found a feed to fetch!")
    scrape_feed(state.db, feed)


def scrape_feed(db: Queries, feed: Feed) -> None:
    """Mark ``feed`` fetched, download it and store its new posts."""
    try:
        db.mark_feed_fetched(feed.id)
    except DatabaseError as exc:
        log.warning("Couldn't mark feed %s fetched: %s", feed.name, exc)
        return
    try:
        data = fetch_feed(feed.url)
    except (OSError, ValueError) as exc:
        log.warning("Couldn't collect feed %s: %s", feed.name, exc)
        return

    for item in data.items:
        now = datetime.now(timezone.utc)
        try:
            db.create_post(
                uuid4(), now, now, item.title, item.link, item.description,
                parse_pub_date(item.pub_date), feed.id,
            )
        except UniqueViolationError:
            continue
        except DatabaseError as exc:
            log.warning("Couldn't create post: %s", exc)
    log.info("Feed %s collected, %d posts found", feed.name, len(data.items))