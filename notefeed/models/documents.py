"""
Document models for notefeed.

This module defines the page-level records produced for posts and reading
notes: scalar metadata first, then the same metadata with its parsed body.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .content import Block


class PostMetadata(BaseModel):
    """
    Scalar facts about a blog post, independent of its body.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Opaque identifier of the source page"
    )

    title: str = Field(
        ...,
        description="Post title, never empty (falls back to the untitled sentinel)"
    )

    published: bool = Field(
        default=False,
        description="Whether the post is published"
    )

    published_at: Optional[str] = Field(
        default=None,
        description="Publication date formatted for display (e.g. 'Jan 24, 2026')"
    )

    thumbnail: Optional[str] = Field(
        default=None,
        description="Thumbnail URL resolved from the first attached file"
    )


class Post(PostMetadata):
    """
    A post with its ordered body blocks.
    """

    blocks: List[Block] = Field(
        default_factory=list,
        description="Body blocks in source order, unsupported types removed"
    )


class ReadingNoteMetadata(BaseModel):
    """
    Scalar facts about a reading note, independent of its body.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Opaque identifier of the source page"
    )

    title: str = Field(
        ...,
        description="Book title or summary, never empty"
    )

    topics: List[str] = Field(
        default_factory=list,
        description="Topic tag names, possibly empty"
    )

    is_public: bool = Field(
        default=False,
        description="Only public notes are ever returned to readers"
    )

    created_at: Optional[str] = Field(
        default=None,
        description="Raw ISO 8601 creation date, left unformatted"
    )


class ReadingNote(ReadingNoteMetadata):
    """
    A reading note with its ordered body blocks.
    """

    blocks: List[Block] = Field(
        default_factory=list,
        description="Body blocks in source order, unsupported types removed"
    )
