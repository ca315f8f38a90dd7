"""Publisher — generates a static life-calendar page from moment files."""

from __future__ import annotations

import argparse
import logging
import re
from datetime import date
from html import escape
from pathlib import Path

import markdown

from config import ConfigError, load_settings, parse_birthday
from formatting import describe_age, describe_range, describe_year_week
from moment import Moment, group_by_week, load_moments
from yearweek import (
    MAX_YEARS,
    WEEKS_PER_YEAR,
    YearWeek,
    current_year_week,
    elapsed_checker,
    is_valid_year_week,
    year_week_to_date_range,
)

logger = logging.getLogger(__name__)

_DEFAULT_TEMPLATE = Path(__file__).resolve().parent.parent / "templates" / "page.html"
_DEFAULT_TITLE = "My Life in Weeks"


def _attachment_label(url: str) -> str:
    """Derive a human-readable label from an image URL."""
    from urllib.parse import urlparse, unquote
    path = unquote(urlparse(url).path)
    name = path.rsplit("/", 1)[-1] if "/" in path else path
    return name or "image"


_BARE_URL_RE = re.compile(
    r"(?<![(<\"'])"   # not preceded by ( < " ' (already in a link)
    r"(https?://\S+)"
)


def _linkify_bare_urls(text: str) -> str:
    """Wrap bare URLs in angle brackets so markdown renders them as links."""
    return _BARE_URL_RE.sub(r"<\1>", text)


def _cell_state(year_week: YearWeek, current: YearWeek, has_elapsed) -> str:
    if year_week == current:
        return "current"
    return "elapsed" if has_elapsed(year_week) else "future"


def _render_cell(
    birthday: date,
    year_week: YearWeek,
    state: str,
    moments: list[Moment],
) -> str:
    """Render one week as a ``<span>`` with a tooltip."""
    classes = ["week", state]
    tooltip = [
        describe_year_week(year_week).capitalize(),
        describe_range(year_week_to_date_range(birthday, year_week)),
    ]
    if moments:
        classes.append("has-moments")
        colored = next((m.color for m in moments if m.color), None)
        if colored:
            classes.append(f"color-{colored}")
        tooltip.extend(f"- {m.name}" for m in moments)
    title = escape("\n".join(tooltip)).replace("\n", "&#10;")
    return f'<span class="{" ".join(classes)}" title="{title}"></span>'


def render_grid(
    birthday: date,
    moments: list[Moment],
    today: date,
) -> str:
    """Render the 90 x 52 grid of weeks, one row per year."""
    by_week = group_by_week(moments)
    has_elapsed = elapsed_checker(birthday, today)
    current = current_year_week(birthday, today)

    rows: list[str] = []
    for year in range(MAX_YEARS):
        cells = []
        for week in range(1, WEEKS_PER_YEAR + 1):
            year_week = YearWeek(year, week)
            state = _cell_state(year_week, current, has_elapsed)
            cells.append(_render_cell(birthday, year_week, state, by_week.get(year_week, [])))
        rows.append(
            f'<div class="year" data-year="{year}">'
            f'<span class="label">{year}</span>{"".join(cells)}</div>'
        )
    return '<div class="grid">\n' + "\n".join(rows) + "\n</div>"


def _render_moment(birthday: date, moment: Moment) -> str:
    """Render a single moment as an HTML list item.

    The journal and images are wrapped in a ``<details>`` element so the
    reader can expand/collapse them.
    """
    when = (
        f"{describe_year_week(moment.year_week)} &middot; "
        f"{describe_range(year_week_to_date_range(birthday, moment.year_week))}"
    )
    detail_parts: list[str] = [f"<p>{when}</p>"]
    if moment.journal.strip():
        journal_html = markdown.markdown(_linkify_bare_urls(moment.journal))
        detail_parts.append(f'<div class="journal">{journal_html}</div>')
    if moment.images:
        links = " ".join(
            f'<a href="{escape(url)}">{escape(_attachment_label(url))}</a>'
            for url in moment.images
        )
        detail_parts.append(f'<div class="images">Images: {links}</div>')

    color = f' class="color-{moment.color}"' if moment.color else ""
    inner = "\n".join(detail_parts)
    return (
        f"<li{color}><details>\n"
        f"<summary><strong>{escape(moment.name)}</strong></summary>\n"
        f"{inner}\n"
        f"</details></li>"
    )


def _render_summary(birthday: date, today: date) -> str:
    current = current_year_week(birthday, today)
    if not is_valid_year_week(current):
        return "<p>Today is not on the calendar.</p>"
    lived = current.year * WEEKS_PER_YEAR + current.week - 1
    total = MAX_YEARS * WEEKS_PER_YEAR
    return (
        f"<p>This is the {describe_age(current)}. "
        f"{lived:,} of {total:,} weeks lived.</p>"
    )


def generate_page(
    birthday: date,
    moments: list[Moment],
    today: date,
    *,
    template: str | None = None,
    site_title: str = _DEFAULT_TITLE,
) -> str:
    """Generate a complete HTML page with the grid and a moments section."""
    if template is None:
        template = _DEFAULT_TEMPLATE.read_text()

    on_grid = [m for m in moments if is_valid_year_week(m.year_week)]
    if on_grid:
        items = "\n".join(_render_moment(birthday, m) for m in on_grid)
        moments_html = f"<h2>Moments</h2>\n<ul>\n{items}\n</ul>"
    else:
        moments_html = "<h2>Moments</h2>\n<p>No moments yet.</p>"

    return (
        template
        .replace("{{ site_title }}", escape(site_title))
        .replace("{{ summary }}", _render_summary(birthday, today))
        .replace("{{ grid }}", render_grid(birthday, on_grid, today))
        .replace("{{ moments }}", moments_html)
    )


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Generate a static life calendar from moments")
    parser.add_argument("--birthday", type=str, default=None,
                        help="Birthday as YYYY-MM-DD (default: $LIFE_CALENDAR_BIRTHDAY)")
    parser.add_argument("--moments-dir", type=Path, default=settings.moments_dir)
    parser.add_argument("--output-dir", type=Path, required=True)
    parser.add_argument("--template", type=Path, default=None)
    parser.add_argument("--title", type=str, default=_DEFAULT_TITLE)
    parser.add_argument("--user-id", type=str, default=None,
                        help="Only render moments for this user (default: all)")
    parser.add_argument("--today", type=date.fromisoformat, default=None,
                        help="Override today's date for testing")
    args = parser.parse_args(argv)

    try:
        birthday = parse_birthday(args.birthday) if args.birthday else settings.birthday
    except ConfigError as exc:
        parser.error(str(exc))
    if birthday is None:
        parser.error("--birthday or LIFE_CALENDAR_BIRTHDAY is required")

    template_text = args.template.read_text() if args.template else None

    today = args.today or date.today()
    moments = load_moments(args.moments_dir, user_id=args.user_id)
    html = generate_page(birthday, moments, today, template=template_text, site_title=args.title)

    args.output_dir.mkdir(parents=True, exist_ok=True)
    output = args.output_dir / "index.html"
    output.write_text(html)
    logger.info("Wrote %s (%d moments)", output, len(moments))


if __name__ == "__main__":
    main()
