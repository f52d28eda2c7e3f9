"""
Tests for rich-text normalization.
"""

import itertools
import unittest

from notefeed.models import RichText, RichTextAnnotations
from notefeed.parsers.rich_text import ANNOTATION_FLAGS, parse_rich_text, plain_text
from notefeed.sources.mock import sample_span


class TestParseRichText(unittest.TestCase):
    """Test conversion of source rich-text items into RichText spans."""

    def test_plain_text(self):
        """Test an unformatted span gets all flags False and no link."""
        result = parse_rich_text([sample_span("Hello World")])

        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].text, "Hello World")
        self.assertEqual(result[0].annotations.model_dump(), RichTextAnnotations().model_dump())
        self.assertFalse(result[0].has_link)
        self.assertIsNone(result[0].link)

    def test_every_annotation_combination(self):
        """Test all 32 flag combinations are copied exactly."""
        for values in itertools.product([False, True], repeat=len(ANNOTATION_FLAGS)):
            flags = dict(zip(ANNOTATION_FLAGS, values))
            span = parse_rich_text([sample_span("x", **flags)])[0]
            self.assertEqual(span.annotations.model_dump(), flags)

    def test_link(self):
        """Test a linked span carries its URL."""
        span = parse_rich_text([sample_span("Link", href="https://example.com")])[0]

        self.assertTrue(span.has_link)
        self.assertEqual(span.link, "https://example.com")
        self.assertEqual(span.model_dump()["link"], "https://example.com")

    def test_empty_link_is_kept(self):
        """Test an empty-string link stays distinguishable from no link."""
        item = sample_span("Odd")
        item["href"] = ""
        span = parse_rich_text([item])[0]

        self.assertTrue(span.has_link)
        self.assertEqual(span.link, "")
        self.assertEqual(span.model_dump()["link"], "")

    def test_unlinked_span_omits_link_when_serialized(self):
        span = parse_rich_text([sample_span("Plain")])[0]
        self.assertNotIn("link", span.model_dump())
        self.assertEqual(span.model_dump()["annotations"]["bold"], False)

    def test_order_and_length_preserved(self):
        """Test spans are neither merged nor split."""
        items = [
            sample_span("Normal "),
            sample_span("Bold", bold=True),
            sample_span("Bold", bold=True),
            sample_span(" End"),
        ]
        result = parse_rich_text(items)

        self.assertEqual([span.text for span in result], ["Normal ", "Bold", "Bold", " End"])
        self.assertTrue(result[1].annotations.bold)
        self.assertFalse(result[3].annotations.bold)

    def test_missing_fields_default(self):
        """Test missing text and annotation flags fall back to defaults."""
        result = parse_rich_text([
            {"annotations": {"italic": True}},
            {"plain_text": "no annotations"},
            "not a mapping",
        ])

        self.assertEqual(len(result), 3)
        self.assertEqual(result[0].text, "")
        self.assertTrue(result[0].annotations.italic)
        self.assertFalse(result[0].annotations.bold)
        self.assertEqual(result[1].annotations.model_dump(), RichTextAnnotations().model_dump())
        self.assertEqual(result[2], RichText())

    def test_non_list_input(self):
        self.assertEqual(parse_rich_text(None), [])
        self.assertEqual(parse_rich_text("text"), [])

    def test_color_is_discarded(self):
        item = sample_span("Red")
        item["annotations"]["color"] = "red"
        span = parse_rich_text([item])[0]
        self.assertNotIn("color", span.annotations.model_dump())

    def test_plain_text_concatenates(self):
        spans = parse_rich_text([sample_span("a"), sample_span("\n"), sample_span("b")])
        self.assertEqual(plain_text(spans), "a\nb")


if __name__ == '__main__':
    unittest.main()
