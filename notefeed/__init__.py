"""
notefeed: a content pipeline for Notion-backed sites.

Fetches posts and reading notes from Notion and normalizes pages and blocks
into a stable, render-agnostic content model.
"""

__version__ = "0.1.0"

from .models import (
    RichText,
    RichTextAnnotations,
    Block,
    PostMetadata,
    Post,
    ReadingNoteMetadata,
    ReadingNote,
)
from .parsers import parse_rich_text, parse_block, parse_blocks, map_page_to_post, parse_reading_note_page
from .sources import BasePageSource, SourceError, MockPageSource, NotionPageSource
from .services import ContentService

__all__ = [
    "RichText",
    "RichTextAnnotations",
    "Block",
    "PostMetadata",
    "Post",
    "ReadingNoteMetadata",
    "ReadingNote",
    "parse_rich_text",
    "parse_block",
    "parse_blocks",
    "map_page_to_post",
    "parse_reading_note_page",
    "BasePageSource",
    "SourceError",
    "MockPageSource",
    "NotionPageSource",
    "ContentService",
]
