"""
Page property mapping for notefeed.

Each extractor reads one named property from a source page's property bag and
checks its ``type`` discriminant. A missing property or one of the wrong shape
yields that field's default, so mapping a page never fails.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, List, Optional

from ..models import PostMetadata, ReadingNoteMetadata
from .blocks import resolve_file_url
from .rich_text import parse_rich_text, plain_text

UNTITLED_POST = "Untitled"
UNTITLED_NOTE = "無題"

# Month abbreviations for display dates, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _property(page: Any, name: str, expected_type: str) -> Optional[Mapping]:
    """Return the named property if it exists and has the expected type."""
    if not isinstance(page, Mapping):
        return None
    properties = page.get("properties")
    if not isinstance(properties, Mapping):
        return None
    prop = properties.get(name)
    if isinstance(prop, Mapping) and prop.get("type") == expected_type:
        return prop
    return None


def page_id(page: Any) -> str:
    if isinstance(page, Mapping) and page.get("id") is not None:
        return str(page["id"])
    return ""


def extract_title(page: Any, name: str = "title", untitled: str = UNTITLED_POST) -> str:
    """
    Extract a post title from the first span of the title property.

    Returns:
        The first span's exact text, or ``untitled`` when there is no title
        property, no spans, or only whitespace
    """
    prop = _property(page, name, "title")
    if prop is None:
        return untitled
    spans = parse_rich_text(prop.get("title"))
    if not spans or not spans[0].text.strip():
        return untitled
    return spans[0].text


def extract_note_title(page: Any, name: str = "title", untitled: str = UNTITLED_NOTE) -> str:
    """Extract a reading note title: every title span joined, then trimmed."""
    prop = _property(page, name, "title")
    if prop is None:
        return untitled
    return plain_text(parse_rich_text(prop.get("title"))).strip() or untitled


def extract_checkbox(page: Any, name: str) -> bool:
    prop = _property(page, name, "checkbox")
    return prop is not None and prop.get("checkbox") is True


def extract_published(page: Any) -> bool:
    """Extract the published flag, defaulting to False."""
    return extract_checkbox(page, "published")


def extract_date_start(page: Any, name: str) -> Optional[str]:
    """Return the raw ISO start of a date property, or None."""
    prop = _property(page, name, "date")
    if prop is None:
        return None
    value = prop.get("date")
    if not isinstance(value, Mapping):
        return None
    start = value.get("start")
    return start if isinstance(start, str) and start else None


def format_date(date_string: str) -> str:
    """
    Format an ISO date or datetime for display.

    Args:
        date_string: ISO 8601 string such as ``2026-01-24`` or ``2026-01-24T09:30:00.000Z``

    Returns:
        A string like ``Jan 24, 2026``; unparseable input is returned unchanged
    """
    try:
        parsed: date = datetime.fromisoformat(date_string).date()
    except (TypeError, ValueError):
        try:
            parsed = date.fromisoformat(date_string[:10])
        except (TypeError, ValueError):
            return date_string
    return f"{MONTH_ABBREVIATIONS[parsed.month - 1]} {parsed.day}, {parsed.year}"


def extract_published_at(page: Any) -> Optional[str]:
    """Extract the publication date formatted for display, or None."""
    start = extract_date_start(page, "published_at")
    return format_date(start) if start else None


def extract_thumbnail(page: Any) -> Optional[str]:
    """Resolve the first file of the thumbnail property to a URL, or None."""
    prop = _property(page, "thumbnail", "files")
    if prop is None:
        return None
    files = prop.get("files")
    if not isinstance(files, list) or not files:
        return None
    return resolve_file_url(files[0])


def extract_topics(page: Any, name: str = "topic") -> List[str]:
    """Extract the names of a multi-select property; empty when absent."""
    prop = _property(page, name, "multi_select")
    if prop is None:
        return []
    options = prop.get("multi_select")
    if not isinstance(options, list):
        return []
    return [
        option["name"] for option in options
        if isinstance(option, Mapping) and isinstance(option.get("name"), str)
    ]


def map_page_to_post(page: Any, untitled: str = UNTITLED_POST) -> PostMetadata:
    """Map a source page to post metadata (no body)."""
    return PostMetadata(
        id=page_id(page),
        title=extract_title(page, untitled=untitled),
        published=extract_published(page),
        published_at=extract_published_at(page),
        thumbnail=extract_thumbnail(page),
    )


def parse_reading_note_page(page: Any, untitled: str = UNTITLED_NOTE) -> ReadingNoteMetadata:
    """Map a source page to reading note metadata (no body)."""
    return ReadingNoteMetadata(
        id=page_id(page),
        title=extract_note_title(page, untitled=untitled),
        topics=extract_topics(page),
        is_public=extract_checkbox(page, "is_public"),
        created_at=extract_date_start(page, "created_at"),
    )
