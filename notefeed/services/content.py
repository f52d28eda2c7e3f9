"""
Content service for notefeed.

This module composes a page source with the parsers to produce posts, reading
notes and topic lists. It is the only layer with a failure surface: every
upstream or assembly failure is logged and collapsed into None or an empty
list, so no exception reaches callers.
"""

import asyncio
import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pyuca import Collator

from ..config import ConfigManager, config as default_config
from ..models import Post, PostMetadata, ReadingNote, ReadingNoteMetadata
from ..parsers import MissingImageSourceError, map_page_to_post, parse_blocks, parse_reading_note_page
from ..parsers.pages import extract_topics
from ..sources import BasePageSource, SourceError

POSTS_SORTS = [{"property": "published_at", "direction": "descending"}]
NOTES_SORTS = [{"property": "created_at", "direction": "descending"}]


def build_posts_filter(year: Optional[int] = None) -> Dict[str, Any]:
    """
    Build the query filter for published posts.

    Args:
        year: Restrict to posts published in this calendar year

    Returns:
        A filter in the source API's syntax. The year range is inclusive of
        January 1st and exclusive of the next year's January 1st.
    """
    published = {"property": "published", "checkbox": {"equals": True}}
    if year is None:
        return published
    return {
        "and": [
            published,
            {"property": "published_at", "date": {"on_or_after": f"{year}-01-01"}},
            {"property": "published_at", "date": {"before": f"{year + 1}-01-01"}},
        ]
    }


def build_public_notes_filter() -> Dict[str, Any]:
    return {"property": "is_public", "checkbox": {"equals": True}}


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Parses the bundled allkeys table, so keep one instance
    return Collator()


def sort_topics(names: Iterable[str]) -> List[str]:
    """
    Deduplicate topic names and sort them with the Unicode Collation Algorithm.

    Kana are ordered by sound regardless of script and lowercase sorts before
    uppercase, the same ordering a Japanese locale comparison gives.
    """
    collator = _collator()
    return sorted(set(names), key=lambda name: (collator.sort_key(name), name))


def _pages_only(records: Iterable[Any]) -> List[Mapping]:
    return [record for record in records if isinstance(record, Mapping) and record.get("object") == "page"]


class ContentService:
    """
    Fetches and assembles posts and reading notes.
    """

    def __init__(self, source: BasePageSource, config: Optional[ConfigManager] = None,
                 posts_collection: Optional[str] = None, notes_collection: Optional[str] = None):
        """
        Initialize the content service.

        Args:
            source: Page source to read from
            config: Configuration manager (defaults to the global instance)
            posts_collection: Posts collection id (defaults to config value)
            notes_collection: Reading notes collection id (defaults to config value)
        """
        self.source = source
        self.config = config or default_config
        self.posts_collection = posts_collection or self.config.posts_database_id
        self.notes_collection = notes_collection or self.config.reading_notes_database_id
        self.strict_images = self.config.strict_images

    async def _query(self, collection_id: str, filter: Dict[str, Any],
                     sorts: Optional[List[Dict[str, Any]]] = None) -> List[Mapping]:
        return _pages_only(await self.source.query_pages(collection_id, filter=filter, sorts=sorts))

    async def _fetch_with_children(self, page_id: str) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Fetch a page and its child blocks concurrently; both must succeed.

        The first failure cancels the other request and is re-raised as is.
        """
        try:
            async with asyncio.TaskGroup() as group:
                page_task = group.create_task(self.source.retrieve_page(page_id))
                children_task = group.create_task(self.source.list_block_children(page_id))
        except ExceptionGroup as e:
            raise e.exceptions[0] from None
        return page_task.result(), children_task.result()

    async def list_posts(self, year: Optional[int] = None) -> List[PostMetadata]:
        """
        List published posts, newest first, without their bodies.

        Args:
            year: Only include posts published in this year

        Returns:
            Post metadata, or an empty list if the source could not be queried
        """
        try:
            pages = await self._query(self.posts_collection, build_posts_filter(year), POSTS_SORTS)
            untitled = self.config.untitled_post_title
            posts = [map_page_to_post(page, untitled=untitled) for page in pages]
        except SourceError as e:
            logging.warning(f"Could not list posts: {e}")
            return []
        except Exception as e:
            logging.error(f"Unexpected error listing posts: {e}", exc_info=True)
            return []

        logging.info(f"Listed {len(posts)} posts" + (f" for {year}" if year is not None else ""))
        return posts

    async def get_post(self, post_id: str) -> Optional[Post]:
        """
        Fetch a post with its body.

        Returns:
            The post, or None if it does not exist or could not be retrieved
        """
        try:
            page, children = await self._fetch_with_children(post_id)
            if "properties" not in page:
                return None
            blocks = parse_blocks(children, strict_images=self.strict_images)
        except (SourceError, MissingImageSourceError) as e:
            logging.warning(f"Could not get post {post_id}: {e}")
            return None
        except Exception as e:
            logging.error(f"Unexpected error assembling post {post_id}: {e}", exc_info=True)
            return None

        metadata = map_page_to_post(page, untitled=self.config.untitled_post_title)
        return Post(**dict(metadata), blocks=blocks)

    async def list_reading_notes(self, topic: Optional[str] = None) -> List[ReadingNoteMetadata]:
        """
        List public reading notes, newest first, without their bodies.

        Args:
            topic: Only include notes tagged with this topic

        Returns:
            Reading note metadata, or an empty list if the source could not be queried
        """
        try:
            pages = await self._query(self.notes_collection, build_public_notes_filter(), NOTES_SORTS)
            untitled = self.config.untitled_note_title
            notes = [parse_reading_note_page(page, untitled=untitled) for page in pages]
        except SourceError as e:
            logging.warning(f"Could not list reading notes: {e}")
            return []
        except Exception as e:
            logging.error(f"Unexpected error listing reading notes: {e}", exc_info=True)
            return []

        if topic:
            notes = [note for note in notes if topic in note.topics]
        return notes

    async def get_reading_note(self, note_id: str) -> Optional[ReadingNote]:
        """
        Fetch a public reading note with its body.

        Returns:
            The note, or None if it does not exist, could not be retrieved or
            is not public
        """
        try:
            page, children = await self._fetch_with_children(note_id)
            if "properties" not in page:
                return None
            metadata = parse_reading_note_page(page, untitled=self.config.untitled_note_title)
            if not metadata.is_public:
                logging.info(f"Reading note {note_id} is not public")
                return None
            blocks = parse_blocks(children, strict_images=self.strict_images)
        except (SourceError, MissingImageSourceError) as e:
            logging.warning(f"Could not get reading note {note_id}: {e}")
            return None
        except Exception as e:
            logging.error(f"Unexpected error assembling reading note {note_id}: {e}", exc_info=True)
            return None

        return ReadingNote(**dict(metadata), blocks=blocks)

    async def list_topics(self) -> List[str]:
        """
        Collect every topic used by public reading notes.

        Returns:
            Deduplicated, sorted topic names, or an empty list on failure
        """
        try:
            pages = await self._query(self.notes_collection, build_public_notes_filter())
            return sort_topics(name for page in pages for name in extract_topics(page))
        except SourceError as e:
            logging.warning(f"Could not list topics: {e}")
            return []
        except Exception as e:
            logging.error(f"Unexpected error listing topics: {e}", exc_info=True)
            return []
