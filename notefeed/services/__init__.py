"""Services that assemble documents from a page source."""

from .content import ContentService, build_posts_filter, build_public_notes_filter, sort_topics

__all__ = ["ContentService", "build_posts_filter", "build_public_notes_filter", "sort_topics"]
