"""Command-line RSS feed aggregator backed by SQLite."""

__version__ = "0.1.0"

__all__ = [
    "aggregate",
    "browse",
    "cli",
    "commands",
    "config",
    "database",
    "feeds",
    "follows",
    "models",
    "rss",
    "users",
]