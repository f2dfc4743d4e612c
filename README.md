# gatorfeed

A small command-line RSS aggregator. Users register, add RSS feeds, follow
the feeds they care about, and a long-running aggregator collects new posts
into a local SQLite database so they can be browsed from the terminal.

## Installation

```
pip install .
```

This installs the `gatorfeed` command. It needs nothing beyond the Python
standard library.

## Configuration

Every command first reads `.gatorconfig.json` from your home directory. The
file must exist; if it is missing or is not valid JSON, the command stops with
`error reading config: ...`.

```json
{"db_url": "/home/me/gatorfeed.db", "current_user_name": ""}
```

- `db_url` names the SQLite database. It may be a plain file path,
  `sqlite:///path/to/file.db`, or `sqlite://` / `:memory:` for a throwaway
  in-memory database. Any other `scheme://` URL is rejected. The tables are
  created on first use.
- `current_user_name` is the logged-in user; `login` and `register` rewrite
  the file to update it. Other keys in the file are dropped when it is
  rewritten.

## Commands

```
gatorfeed <command> [args...]
```

| Command | Arguments | What it does |
|---|---|---|
| `register` | `<name>` | Create a user and log in as that user; fails if the name is taken |
| `login` | `<name>` | Switch to an existing user |
| `users` | | List all users, marking the current one with `(current)` |
| `reset` | | Delete all users and, with them, their feeds, follows and posts |
| `addfeed` | `<name> <url>` | Add a feed and follow it as the current user |
| `feeds` | | List every feed with the user who added it |
| `follow` | `<url>` | Follow an already added feed |
| `following` | | List the feeds the current user follows |
| `unfollow` | `<url>` | Stop following a feed |
| `agg` | `<time_between_reqs>` | Fetch feeds forever, one per interval |
| `browse` | `[limit]` | Show the newest posts from followed feeds (default 2) |

`addfeed`, `follow`, `following`, `unfollow` and `browse` act on behalf of
the current user, who must exist in the database.

Errors are printed to standard error and the command exits with status 1;
success exits with 0.

### The aggregator

`agg` takes an interval such as `500ms`, `30s`, `1m` or `1h30m` (units `ns`,
`us`, `ms`, `s`, `m`, `h`); the interval must be positive. It scrapes one feed
straight away and then one more after each interval, until interrupted with
Ctrl-C.

Each scrape picks the feed fetched longest ago (never-fetched feeds first),
marks it fetched, downloads it with a 10 second timeout and stores each item
as a post. Items whose URL is already stored are skipped. Publication dates in
RFC 1123 form with a numeric zone (`Mon, 02 Jan 2006 15:04:05 -0700`) are
recorded; other dates are left empty, and such posts sort after dated ones in
`browse`. A feed that cannot be downloaded or parsed is logged and skipped.

Progress is reported through the `gatorfeed.aggregate` logger; warnings reach
standard error even without logging configured.

## Example session

```
gatorfeed register alice
gatorfeed addfeed "Example News" https://example.com/feed.xml
gatorfeed agg 1m        # leave running in another terminal, stop with Ctrl-C
gatorfeed browse 5
```

## Using it as a library

- `gatorfeed.database.connect(url)` opens a database and returns a `Queries`
  object (usable as a context manager) with methods such as `create_user`,
  `create_feed`, `create_feed_follow`, `get_posts_for_user` and
  `get_next_feed_to_fetch`. Failures raise `DatabaseError`, with
  `NoRowsError` and `UniqueViolationError` for missing rows and duplicates.
- `gatorfeed.rss.parse_feed(data)` parses an RSS document into an `RSSFeed`
  of `RSSItem`s, unescaping HTML entities in titles and descriptions;
  `fetch_feed(url, timeout)` downloads and parses one.
- `gatorfeed.config.read()` and `write()` load and save the configuration.

## Limitations

- Storage is SQLite only; there is no support for a database server.
- Only RSS 2.0 documents (`<rss><channel><item>`) are understood; Atom feeds
  yield no posts.
- There is no scheduling apart from `agg` running in the foreground.

## Development

```
pip install -e ".[test]"
pytest
```