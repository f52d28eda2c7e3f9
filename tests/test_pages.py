"""
Tests for page property mapping.

Each extractor must fall back to its documented default when a property is
missing or has an unexpected shape.
"""

import unittest

from notefeed.parsers.pages import (
    extract_note_title,
    extract_published,
    extract_published_at,
    extract_thumbnail,
    extract_title,
    extract_topics,
    format_date,
    map_page_to_post,
    parse_reading_note_page,
)
from notefeed.sources.mock import sample_note, sample_page, sample_span


def page_with(**properties):
    return {"object": "page", "id": "page-1", "properties": properties}


class TestTitle(unittest.TestCase):
    """Test title extraction and the untitled sentinel."""

    def test_single_span(self):
        page = sample_page("p", title="Hello, world ")
        self.assertEqual(extract_title(page), "Hello, world ")

    def test_first_span_only(self):
        page = page_with(title={"type": "title", "title": [sample_span("First"), sample_span(" second")]})
        self.assertEqual(extract_title(page), "First")

    def test_empty_span_list(self):
        page = page_with(title={"type": "title", "title": []})
        self.assertEqual(extract_title(page), "Untitled")

    def test_whitespace_only(self):
        page = page_with(title={"type": "title", "title": [sample_span("   ")]})
        self.assertEqual(extract_title(page), "Untitled")

    def test_missing_or_wrong_shape(self):
        self.assertEqual(extract_title(page_with()), "Untitled")
        self.assertEqual(extract_title(page_with(title={"type": "rich_text", "rich_text": []})), "Untitled")
        self.assertEqual(extract_title({}), "Untitled")

    def test_custom_sentinel(self):
        self.assertEqual(extract_title(page_with(), untitled="No title"), "No title")

    def test_note_title_joins_and_trims(self):
        page = page_with(title={"type": "title", "title": [sample_span(" Clean "), sample_span("Code ")]})
        self.assertEqual(extract_note_title(page), "Clean Code")
        self.assertEqual(extract_note_title(page_with(title={"type": "title", "title": []})), "無題")


class TestScalarProperties(unittest.TestCase):
    """Test published flag, dates, thumbnails and topics."""

    def test_published(self):
        self.assertTrue(extract_published(sample_page("p", published=True)))
        self.assertFalse(extract_published(sample_page("p", published=False)))
        self.assertFalse(extract_published(page_with()))
        self.assertFalse(extract_published(page_with(published={"type": "select", "select": None})))

    def test_format_date(self):
        self.assertEqual(format_date("2026-01-24"), "Jan 24, 2026")
        self.assertEqual(format_date("2024-12-05T09:30:00.000Z"), "Dec 5, 2024")
        self.assertEqual(format_date("2024-07-01T23:00:00+09:00"), "Jul 1, 2024")
        self.assertEqual(format_date("not a date"), "not a date")

    def test_published_at(self):
        self.assertEqual(extract_published_at(sample_page("p", published_at="2024-01-01")), "Jan 1, 2024")
        self.assertIsNone(extract_published_at(sample_page("p")))
        self.assertIsNone(extract_published_at(page_with(published_at={"type": "date", "date": {"start": None}})))
        self.assertIsNone(extract_published_at(page_with(published_at={"type": "checkbox", "checkbox": True})))

    def test_thumbnail_both_shapes(self):
        external = sample_page("p", thumbnail={"type": "external", "external": {"url": "https://e.com/t.png"}})
        hosted = sample_page("p", thumbnail={"type": "file", "file": {"url": "https://s3.e.com/t.png?sig"}})

        self.assertEqual(extract_thumbnail(external), "https://e.com/t.png")
        self.assertEqual(extract_thumbnail(hosted), "https://s3.e.com/t.png?sig")
        self.assertIsNone(extract_thumbnail(sample_page("p")))
        self.assertIsNone(extract_thumbnail(page_with(thumbnail={"type": "files", "files": [{"name": "broken"}]})))

    def test_topics(self):
        self.assertEqual(extract_topics(sample_note("n", topics=["a", "b"])), ["a", "b"])
        self.assertEqual(extract_topics(sample_note("n")), [])
        self.assertEqual(extract_topics(page_with()), [])
        self.assertEqual(extract_topics(page_with(topic={"type": "select", "select": {"name": "a"}})), [])


class TestPageMapping(unittest.TestCase):
    """Test whole-page mapping is total."""

    def test_map_page_to_post(self):
        page = sample_page(
            "post-1",
            title="My Post",
            published=True,
            published_at="2024-01-01",
            thumbnail={"type": "external", "external": {"url": "https://e.com/t.png"}},
        )
        post = map_page_to_post(page)

        self.assertEqual(post.model_dump(), {
            "id": "post-1",
            "title": "My Post",
            "published": True,
            "published_at": "Jan 1, 2024",
            "thumbnail": "https://e.com/t.png",
        })

    def test_empty_page_maps_to_defaults(self):
        post = map_page_to_post({"object": "page", "id": "bare"})

        self.assertEqual(post.model_dump(), {
            "id": "bare",
            "title": "Untitled",
            "published": False,
            "published_at": None,
            "thumbnail": None,
        })

    def test_parse_reading_note_page(self):
        note = parse_reading_note_page(sample_note(
            "test-id-123",
            title="テスト読書メモ",
            topics=["プログラミング", "技術書"],
            created_at="2024-01-01",
            is_public=True,
        ))

        self.assertEqual(note.model_dump(), {
            "id": "test-id-123",
            "title": "テスト読書メモ",
            "topics": ["プログラミング", "技術書"],
            "is_public": True,
            "created_at": "2024-01-01",
        })

    def test_reading_note_keeps_raw_date(self):
        """Test created_at is left as the raw ISO string, unlike published_at."""
        note = parse_reading_note_page(sample_note("n", created_at="2024-03-05T10:00:00.000+09:00"))
        self.assertEqual(note.created_at, "2024-03-05T10:00:00.000+09:00")

    def test_reading_note_defaults(self):
        note = parse_reading_note_page(page_with(is_public={"type": "rich_text", "rich_text": []}))

        self.assertEqual(note.title, "無題")
        self.assertEqual(note.topics, [])
        self.assertFalse(note.is_public)
        self.assertIsNone(note.created_at)


if __name__ == '__main__':
    unittest.main()
