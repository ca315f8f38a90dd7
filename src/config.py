"""Settings read from the environment (and a local ``.env`` file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MOMENTS_DIR = Path("moments")
DEFAULT_USER_ID = "me"


class ConfigError(ValueError):
    """Raised when an environment setting cannot be interpreted."""


@dataclass
class Settings:
    birthday: date | None
    moments_dir: Path = DEFAULT_MOMENTS_DIR
    user_id: str = DEFAULT_USER_ID


def parse_birthday(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` birthday."""
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid birthday {value!r}: expected YYYY-MM-DD") from exc


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``LIFE_CALENDAR_*`` variables."""
    env = os.environ if environ is None else environ
    raw_birthday = env.get("LIFE_CALENDAR_BIRTHDAY")
    return Settings(
        birthday=parse_birthday(raw_birthday) if raw_birthday else None,
        moments_dir=Path(env.get("LIFE_CALENDAR_MOMENTS_DIR") or DEFAULT_MOMENTS_DIR),
        user_id=env.get("LIFE_CALENDAR_USER_ID") or DEFAULT_USER_ID,
    )
