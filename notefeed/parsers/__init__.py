"""Parsers that turn source API records into notefeed models."""

from .rich_text import parse_rich_text, plain_text
from .blocks import parse_block, parse_blocks, resolve_file_url, MissingImageSourceError
from .pages import format_date, map_page_to_post, parse_reading_note_page

__all__ = [
    "parse_rich_text",
    "plain_text",
    "parse_block",
    "parse_blocks",
    "resolve_file_url",
    "MissingImageSourceError",
    "format_date",
    "map_page_to_post",
    "parse_reading_note_page",
]
