"""Reading and writing the user's configuration file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_FILE_NAME = ".gatorconfig.json"

_FIELDS = ("db_url", "current_user_name")


def config_path() -> Path:
    """Return the location of the configuration file in the home directory."""
    return Path.home() / CONFIG_FILE_NAME


@dataclass
class Config:
    """Connection settings and the name of the logged-in user."""

    db_url: str = ""
    current_user_name: str = ""
    path: Path | None = field(default=None, compare=False, repr=False)

    def set_user(self, user_name: str) -> None:
        """Make ``user_name`` the current user and save the configuration."""
        self.current_user_name = user_name
        write(self, self.path)

    def _as_dict(self) -> dict[str, str]:
        return {"db_url": self.db_url, "current_user_name": self.current_user_name}


def _resolve(path: str | os.PathLike[str] | None) -> Path:
    return Path(path) if path is not None else config_path()


def read(path: str | os.PathLike[str] | None = None) -> Config:
    """Load the configuration file; unknown keys are ignored."""
    target = _resolve(path)
    data = json.loads(target.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"configuration in {target} is not a JSON object")

    values: dict[str, str] = {}
    for key in _FIELDS:
        value = data.get(key)
        if value is None:
            value = ""
        elif not isinstance(value, str):
            raise ValueError(f"configuration key {key!r} must be a string")
        values[key] = value
    return Config(path=target, **values)


def write(config: Config, path: str | os.PathLike[str] | None = None) -> None:
    """Save ``config`` as a single line of JSON."""
    if path is not None:
        target = Path(path)
    elif config.path is not None:
        target = config.path
    else:
        target = config_path()
    text = json.dumps(config._as_dict(), separators=(",", ":"), ensure_ascii=False)
    target.write_text(text + "\n", encoding="utf-8")