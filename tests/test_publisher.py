"""Tests for the publisher module."""

from datetime import date
from pathlib import Path

import pytest

from moment import Moment
from publisher import (
    _DEFAULT_TITLE,
    _linkify_bare_urls,
    _render_moment,
    generate_page,
    main,
    render_grid,
)
from yearweek import YearWeek

BIRTHDAY = date(2000, 1, 1)
# Year 24, week 3.
TODAY = date(2024, 1, 21)

_PLAIN_TEMPLATE = "{{ site_title }}|{{ summary }}|{{ grid }}|{{ moments }}"


def test_grid_has_every_week():
    html = render_grid(BIRTHDAY, [], TODAY)
    assert html.count('class="week') == 90 * 52
    assert html.count('data-year="') == 90


def test_grid_fill_state():
    html = render_grid(BIRTHDAY, [], TODAY)
    assert html.count('class="week current') == 1
    assert html.count('class="week elapsed') == 24 * 52 + 2
    assert html.count('class="week future') == 90 * 52 - (24 * 52 + 3)


def test_grid_tooltip_has_date_range():
    html = render_grid(BIRTHDAY, [], TODAY)
    assert 'title="Year 24, week 3&#10;01/15/24 - 01/21/24"' in html
    assert 'title="Year 0, week 52&#10;12/23/00 - 12/31/00"' in html


def test_grid_marks_moments():
    moments = [
        Moment(year=24, week=1, name="New Year's Day", color="red"),
        Moment(year=30, week=10, name="Future plan"),
    ]
    html = render_grid(BIRTHDAY, moments, TODAY)
    assert 'class="week elapsed has-moments color-red"' in html
    assert "- New Year&#x27;s Day" in html
    assert 'class="week future has-moments"' in html


def test_render_moment_with_journal_and_images():
    moment = Moment(
        year=24, week=3, name="Ski <trip>",
        journal="Details at [the lodge](https://example.com/lodge)",
        images=["https://storage.example.com/photos/slope%201.jpg"],
        color="zomp",
    )
    html = _render_moment(BIRTHDAY, moment)
    assert '<li class="color-zomp">' in html
    assert "Ski &lt;trip&gt;" in html
    assert "year 24, week 3" in html
    assert '<a href="https://example.com/lodge">the lodge</a>' in html
    assert ">slope 1.jpg</a>" in html


def test_render_moment_without_journal():
    html = _render_moment(BIRTHDAY, Moment(year=1, week=1, name="Walked"))
    assert 'class="journal"' not in html
    assert 'class="images"' not in html


def test_linkify_bare_urls():
    assert _linkify_bare_urls("see https://example.com") == "see <https://example.com>"
    assert _linkify_bare_urls("[x](https://example.com)") == "[x](https://example.com)"


def test_generate_page_default_template():
    html = generate_page(BIRTHDAY, [], TODAY)
    assert html.startswith("<!DOCTYPE html>")
    assert _DEFAULT_TITLE in html
    assert "No moments yet." in html
    assert "{{" not in html


def test_generate_page_summary():
    html = generate_page(BIRTHDAY, [], TODAY, template=_PLAIN_TEMPLATE)
    assert "This is the 3rd week of your 25th year." in html
    assert "1,250 of 4,680 weeks lived." in html


def test_generate_page_before_birth():
    html = generate_page(BIRTHDAY, [], date(1999, 1, 1), template=_PLAIN_TEMPLATE)
    assert "Today is not on the calendar." in html
    assert html.count('class="week future') == 90 * 52


def test_generate_page_escapes_title():
    html = generate_page(BIRTHDAY, [], TODAY, template=_PLAIN_TEMPLATE, site_title="Me & You")
    assert html.startswith("Me &amp; You|")


def test_generate_page_lists_moments():
    moments = [Moment(year=24, week=3, name="Ski trip", journal="Cold.")]
    html = generate_page(BIRTHDAY, moments, TODAY, template=_PLAIN_TEMPLATE)
    assert "<h2>Moments</h2>" in html
    assert "<strong>Ski trip</strong>" in html
    assert "<p>Cold.</p>" in html


def test_main_end_to_end(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("LIFE_CALENDAR_BIRTHDAY", raising=False)
    moments_dir = tmp_path / "moments"
    moments_dir.mkdir()
    Moment(year=24, week=3, name="Ski trip").dump(moments_dir / "ski.md")
    Moment(year=24, week=3, name="Offsite", user_id="work").dump(moments_dir / "work.md")
    out_dir = tmp_path / "site"

    main([
        "--birthday", "2000-01-01",
        "--moments-dir", str(moments_dir),
        "--output-dir", str(out_dir),
        "--title", "Test Life",
        "--user-id", "me",
        "--today", "2024-01-21",
    ])

    html = (out_dir / "index.html").read_text()
    assert "Test Life" in html
    assert "Ski trip" in html
    assert "Offsite" not in html


def test_main_custom_template(tmp_path: Path):
    template = tmp_path / "t.html"
    template.write_text("<h1>{{ site_title }}</h1>{{ moments }}")
    out_dir = tmp_path / "site"

    main([
        "--birthday", "2000-01-01",
        "--moments-dir", str(tmp_path / "empty"),
        "--output-dir", str(out_dir),
        "--template", str(template),
    ])

    html = (out_dir / "index.html").read_text()
    assert html.startswith(f"<h1>{_DEFAULT_TITLE}</h1>")
    assert "No moments yet." in html


def test_main_requires_birthday(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("LIFE_CALENDAR_BIRTHDAY", raising=False)
    with pytest.raises(SystemExit) as exc_info:
        main(["--output-dir", str(tmp_path)])
    assert exc_info.value.code == 2
