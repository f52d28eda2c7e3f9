"""
Block parsing for notefeed.

This module converts one source block record into one of the closed set of
content blocks, or None when the source type has no counterpart. Callers map a
whole child list through parse_block and drop the None results, which is what
parse_blocks does.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..models import (
    Block,
    BulletedListItemBlock,
    CodeBlock,
    HeadingBlock,
    ImageBlock,
    NumberedListItemBlock,
    ParagraphBlock,
    QuoteBlock,
)
from .rich_text import parse_rich_text, plain_text

# The source schema's neutral value for code blocks without a language
DEFAULT_CODE_LANGUAGE = "plain text"


class MissingImageSourceError(ValueError):
    """Raised under the strict image policy when an image has no resolvable URL."""

    def __init__(self, block_id: Optional[str] = None):
        self.block_id = block_id
        super().__init__(f"Image block {block_id or '<unknown>'} has neither an external nor a file URL")


def resolve_file_url(file_object: Any) -> Optional[str]:
    """
    Resolve a source file object to a URL.

    Handles both shapes the source uses: ``{"type": "external", "external": {"url": ...}}``
    for externally hosted files and ``{"type": "file", "file": {"url": ...}}`` for
    hosted files with a time-limited signed URL.

    Returns:
        The URL, or None when neither shape is present
    """
    if not isinstance(file_object, Mapping):
        return None

    declared = file_object.get("type")
    # Try the declared shape first, then the other one
    shapes = [declared] if declared in ("external", "file") else []
    shapes += [shape for shape in ("external", "file") if shape not in shapes]

    for shape in shapes:
        hosted = file_object.get(shape)
        if isinstance(hosted, Mapping) and isinstance(hosted.get("url"), str) and hosted["url"]:
            return hosted["url"]
    return None


def _rich_text_of(payload: Mapping) -> List:
    return parse_rich_text(payload.get("rich_text"))


def _parse_heading(payload: Mapping, level: int) -> HeadingBlock:
    return HeadingBlock(level=level, children=_rich_text_of(payload))


def _parse_code(payload: Mapping) -> CodeBlock:
    language = payload.get("language")
    return CodeBlock(
        language=language if isinstance(language, str) and language else DEFAULT_CODE_LANGUAGE,
        content=plain_text(_rich_text_of(payload)),
    )


def _parse_image(payload: Mapping, block_id: Optional[str], strict: bool) -> ImageBlock:
    url = resolve_file_url(payload)
    if url is None:
        if strict:
            raise MissingImageSourceError(block_id)
        logging.debug(f"Image block {block_id} has no URL; keeping it without one")
        return ImageBlock()

    captions = parse_rich_text(payload.get("caption"))
    return ImageBlock(url=url, caption=captions[0].text if captions else None)


# Source types whose whole payload is a rich_text list
_RICH_TEXT_BLOCKS: Dict[str, Callable[..., Block]] = {
    "paragraph": ParagraphBlock,
    "quote": QuoteBlock,
    "bulleted_list_item": BulletedListItemBlock,
    "numbered_list_item": NumberedListItemBlock,
}

HEADING_LEVELS = {
    "heading_1": 1,
    "heading_2": 2,
    "heading_3": 3,
}

SUPPORTED_BLOCK_TYPES = frozenset(_RICH_TEXT_BLOCKS) | frozenset(HEADING_LEVELS) | {"code", "image"}


def parse_block(block: Any, strict_images: bool = False) -> Optional[Block]:
    """
    Convert one source block into a content block.

    Args:
        block: A source block record (a dict with a ``type`` discriminant and a
            payload stored under the key of the same name)
        strict_images: Raise MissingImageSourceError for images without any URL
            instead of returning an ImageBlock with ``url=None``

    Returns:
        The parsed block, or None for partial records and unsupported types
    """
    if not isinstance(block, Mapping):
        return None

    block_type = block.get("type")
    if not isinstance(block_type, str) or block_type not in SUPPORTED_BLOCK_TYPES:
        logging.debug(f"Skipping unsupported block type: {block_type!r}")
        return None

    payload = block.get(block_type)
    if not isinstance(payload, Mapping):
        payload = {}

    if block_type in _RICH_TEXT_BLOCKS:
        return _RICH_TEXT_BLOCKS[block_type](children=_rich_text_of(payload))
    if block_type in HEADING_LEVELS:
        return _parse_heading(payload, HEADING_LEVELS[block_type])
    if block_type == "code":
        return _parse_code(payload)
    return _parse_image(payload, block.get("id"), strict_images)


def parse_blocks(blocks: Iterable[Any], strict_images: bool = False) -> List[Block]:
    """Parse a child block list, dropping unsupported blocks and keeping order."""
    parsed = []
    for block in blocks:
        content_block = parse_block(block, strict_images=strict_images)
        if content_block is not None:
            parsed.append(content_block)
    return parsed
