from datetime import datetime, timezone
from uuid import uuid4

import pytest

from gatorfeed.browse import format_post, handler_browse
from gatorfeed.commands import Command, CommandError, State
from gatorfeed.config import Config
from gatorfeed.database import connect


@pytest.fixture
def setup(tmp_path):
    db = connect(":memory:")
    now = datetime.now(timezone.utc)
    user = db.create_user(uuid4(), now, now, "alice")
    feed = db.create_feed(uuid4(), now, now, "News", "https://example.com/rss", user.id)
    db.create_feed_follow(uuid4(), now, now, user.id, feed.id)
    for n in range(3):
        db.create_post(uuid4(), now, now, f"t{n}", f"https://example.com/{n}", "d",
                       datetime(2006, 1, 2 + n, tzinfo=timezone.utc), feed.id)
    yield State(db=db, cfg=Config(path=tmp_path / "c.json")), user
    db.close()


def test_default_limit(setup, capsys):
    state, user = setup
    handler_browse(state, Command("browse"), user)
    out = capsys.readouterr().out
    assert out.startswith("Found 2 posts for user alice:\n")
    assert "--- t2 ---" in out and "--- t0 ---" not in out


def test_explicit_limit(setup, capsys):
    state, user = setup
    handler_browse(state, Command("browse", ["5"]), user)
    assert capsys.readouterr().out.startswith("Found 3 posts")


def test_invalid_limit(setup):
    state, user = setup
    with pytest.raises(CommandError, match="invalid limit"):
        handler_browse(state, Command("browse", ["many"]), user)


def test_format_post(setup):
    state, user = setup
    post = state.db.get_posts_for_user(user.id, 1)[0]
    assert format_post(post).splitlines() == [
        "Wed Jan 4 from News",
        "--- t2 ---",
        "    d",
        "Link: https://example.com/2",
    ]