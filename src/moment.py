"""Moments — journal entries and images attached to a week of life."""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path

import frontmatter
import yaml

from config import DEFAULT_USER_ID
from yearweek import YearWeek

logger = logging.getLogger(__name__)

COLORS = ("red", "coral", "saffron", "pistachio", "zomp", "cerulean")


class MomentError(ValueError):
    """Raised when a moment file holds invalid data."""


@dataclass
class Moment:
    """A single moment pinned to one cell of the life grid.

    The journal is free-form markdown stored as the file body; everything
    else lives in the YAML frontmatter.
    """

    year: int
    week: int
    name: str
    journal: str = ""
    color: str | None = None
    images: list[str] | None = None
    user_id: str = DEFAULT_USER_ID

    @property
    def year_week(self) -> YearWeek:
        return YearWeek(self.year, self.week)

    def validate(self) -> None:
        if not self.year_week.is_valid():
            raise MomentError(
                f"Moment {self.name!r} is off the calendar "
                f"(year {self.year}, week {self.week})"
            )
        if self.color is not None and self.color not in COLORS:
            raise MomentError(f"Unknown color {self.color!r} for moment {self.name!r}")

    @classmethod
    def load(cls, path: Path) -> Moment:
        """Load a moment from a markdown file with YAML frontmatter."""
        try:
            post = frontmatter.load(path)
            raw_images = post.metadata.get("images")
            moment = cls(
                year=int(post.metadata["year"]),
                week=int(post.metadata["week"]),
                name=str(post.metadata["name"]),
                journal=post.content,
                color=post.metadata.get("color"),
                images=list(raw_images) if raw_images else None,
                user_id=post.metadata.get("user_id", DEFAULT_USER_ID),
            )
            moment.validate()
        except (KeyError, TypeError, ValueError, yaml.YAMLError) as exc:
            raise MomentError(f"{path}: {exc}") from exc
        return moment

    def dump(self, path: Path, *, exclusive: bool = False) -> None:
        """Write this moment to a markdown file with YAML frontmatter.

        With *exclusive*, raise ``FileExistsError`` rather than replace an
        existing file.
        """
        self.validate()
        metadata: dict = {
            "year": self.year,
            "week": self.week,
            "name": self.name,
        }
        if self.color is not None:
            metadata["color"] = self.color
        if self.images:
            metadata["images"] = self.images
        metadata["user_id"] = self.user_id
        post = frontmatter.Post(self.journal, **metadata)
        with path.open("x" if exclusive else "w", encoding="utf-8") as fh:
            fh.write(frontmatter.dumps(post) + "\n")


def load_moments(directory: Path, user_id: str | None = None) -> list[Moment]:
    """Load all moments from *directory*, sorted by week then name.

    If *user_id* is given, only moments belonging to that user are returned.
    Files that fail validation are skipped with a warning.
    """
    if not directory.is_dir():
        return []
    moments: list[Moment] = []
    for path in sorted(directory.glob("*.md")):
        try:
            moment = Moment.load(path)
        except MomentError as exc:
            logger.warning("Skipping invalid moment file: %s", exc)
            continue
        if user_id is not None and moment.user_id != user_id:
            continue
        moments.append(moment)
    moments.sort(key=lambda m: (m.year, m.week, m.name))
    return moments


def group_by_week(moments: list[Moment]) -> dict[YearWeek, list[Moment]]:
    grouped: dict[YearWeek, list[Moment]] = defaultdict(list)
    for moment in moments:
        grouped[moment.year_week].append(moment)
    return dict(grouped)


def slugify(name: str | None, year_week: YearWeek, slug: str | None = None) -> str:
    """Generate a filename from the moment name and its week."""
    prefix = f"y{year_week.year:03d}-w{year_week.week:02d}"
    for candidate in (slug, name):
        if not candidate:
            continue
        clean = re.sub(r"[^a-z0-9]+", "-", candidate.lower()).strip("-")
        if clean:
            return f"{prefix}-{clean}.md"
    return f"{prefix}.md"


def unique_path(directory: Path, filename: str) -> Path:
    """Return ``directory / filename``, adding ``-2``, ``-3`` … if it exists."""
    path = directory / filename
    stem, suffix = path.stem, path.suffix
    counter = 2
    while path.exists():
        path = directory / f"{stem}-{counter}{suffix}"
        counter += 1
    return path
