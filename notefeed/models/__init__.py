"""Data models for notefeed."""

from .content import (
    RichTextAnnotations,
    RichText,
    ParagraphBlock,
    HeadingBlock,
    CodeBlock,
    ImageBlock,
    QuoteBlock,
    BulletedListItemBlock,
    NumberedListItemBlock,
    Block,
    BLOCK_LIST_ADAPTER,
)
from .documents import PostMetadata, Post, ReadingNoteMetadata, ReadingNote

__all__ = [
    "RichTextAnnotations",
    "RichText",
    "ParagraphBlock",
    "HeadingBlock",
    "CodeBlock",
    "ImageBlock",
    "QuoteBlock",
    "BulletedListItemBlock",
    "NumberedListItemBlock",
    "Block",
    "BLOCK_LIST_ADAPTER",
    "PostMetadata",
    "Post",
    "ReadingNoteMetadata",
    "ReadingNote",
]
