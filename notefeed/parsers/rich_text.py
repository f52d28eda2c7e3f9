"""
Rich-text normalization for notefeed.

Converts the source API's inline rich-text items into RichText spans with a
fixed annotation shape. One source item always yields exactly one span.
"""

from collections.abc import Mapping
from typing import Any, List, Sequence

from ..models import RichText, RichTextAnnotations

ANNOTATION_FLAGS = ("bold", "italic", "code", "strikethrough", "underline")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def parse_annotations(raw: Any) -> RichTextAnnotations:
    """
    Copy the five style flags from a source annotation bag.

    Missing or non-boolean flags become False; extra keys such as ``color``
    are ignored.
    """
    if not isinstance(raw, Mapping):
        return RichTextAnnotations()
    return RichTextAnnotations(**{flag: raw.get(flag) is True for flag in ANNOTATION_FLAGS})


def parse_rich_text_item(item: Any) -> RichText:
    """Normalize a single source rich-text item."""
    if not isinstance(item, Mapping):
        return RichText()

    text = item.get("plain_text")
    fields = {
        "text": text if isinstance(text, str) else "",
        "annotations": parse_annotations(item.get("annotations")),
    }

    href = item.get("href")
    if isinstance(href, str):
        fields["link"] = href

    return RichText(**fields)


def parse_rich_text(items: Any) -> List[RichText]:
    """
    Normalize a sequence of source rich-text items.

    Args:
        items: The ``rich_text`` (or ``title``/``caption``) list of a source record

    Returns:
        One RichText per input item, in the same order. Anything that is not
        a list yields an empty list.
    """
    if not _is_sequence(items):
        return []
    return [parse_rich_text_item(item) for item in items]


def plain_text(spans: Sequence[RichText]) -> str:
    """Concatenate the text of normalized spans with no separator."""
    return "".join(span.text for span in spans)
