import pytest

from gatorfeed.rss import RSSFeed, fetch_feed, parse_feed

DOC = """<?xml version="1.0"?>
<rss version="2.0"><channel>
<title>News &amp;amp; Views</title>
<link>https://example.com/</link>
<description>All the &amp;lt;news&amp;gt;</description>
<item><title>First &amp;quot;post&amp;quot;</title><link>https://example.com/1</link>
<description>Body one</description><pubDate>Mon, 02 Jan 2006 15:04:05 -0700</pubDate></item>
<item><title>Second</title><link>https://example.com/2</link></item>
</channel></rss>"""


def test_parse_channel_unescaped():
    feed = parse_feed(DOC)
    assert feed.title == "News & Views"
    assert feed.description == "All the <news>"
    assert feed.link == "https://example.com/"


def test_parse_items():
    feed = parse_feed(DOC.encode())
    assert [i.link for i in feed.items] == ["https://example.com/1", "https://example.com/2"]
    assert feed.items[0].title == 'First "post"'
    assert feed.items[0].pub_date == "Mon, 02 Jan 2006 15:04:05 -0700"
    assert feed.items[1].description == ""


def test_parse_without_channel():
    assert parse_feed("<rss/>") == RSSFeed()


def test_parse_invalid():
    with pytest.raises(ValueError):
        parse_feed("<rss><channel>")


def test_fetch_file_url(tmp_path):
    path = tmp_path / "feed.xml"
    path.write_text(DOC, encoding="utf-8")
    feed = fetch_feed(path.as_uri())
    assert feed == parse_feed(DOC)