"""
Mock page source for notefeed.

This module provides an in-memory source with the same record shapes as the
Notion API, for tests and for running the content service without network
access. It evaluates the subset of the filter syntax the content service uses.
"""

import copy
import itertools
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from .base import BasePageSource, SourceError

POSTS_COLLECTION = "mock-posts"
NOTES_COLLECTION = "mock-reading-notes"

_block_ids = itertools.count(1)


class MockPageSource(BasePageSource):
    """
    In-memory page source.

    Used for testing the content service without a real Notion workspace.
    """

    def __init__(self, fail_on: Iterable[str] = ()):
        """
        Initialize an empty mock source.

        Args:
            fail_on: Operation names ("query_pages", "retrieve_page",
                "list_block_children") that raise SourceError, to simulate an
                unreachable upstream
        """
        self.fail_on = set(fail_on)
        self._pages: Dict[str, Dict[str, Any]] = {}
        self._children: Dict[str, List[Dict[str, Any]]] = {}
        self._collections: Dict[str, List[str]] = {}
        self.calls: List[str] = []

    def add_page(self, collection_id: str, page: Dict[str, Any],
                 children: Optional[List[Dict[str, Any]]] = None) -> None:
        """Register a page in a collection along with its child blocks."""
        self._pages[page["id"]] = page
        self._children[page["id"]] = list(children or [])
        self._collections.setdefault(collection_id, []).append(page["id"])

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise SourceError(operation, "simulated upstream failure", status=503)

    async def query_pages(self, collection_id: str, filter: Optional[Dict[str, Any]] = None,
                          sorts: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        self._check("query_pages")
        if collection_id not in self._collections:
            raise SourceError("query_pages", f"Could not find database with ID: {collection_id}",
                              status=404, code="object_not_found")

        pages = [self._pages[page_id] for page_id in self._collections[collection_id]]
        if filter:
            pages = [page for page in pages if self._matches(page, filter)]
        for sort in reversed(sorts or []):
            pages = self._sorted(pages, sort)
        return copy.deepcopy(pages)

    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        self._check("retrieve_page")
        if page_id not in self._pages:
            raise SourceError("retrieve_page", f"Could not find page with ID: {page_id}",
                              status=404, code="object_not_found")
        return copy.deepcopy(self._pages[page_id])

    async def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        self._check("list_block_children")
        if block_id not in self._children:
            raise SourceError("list_block_children", f"Could not find block with ID: {block_id}",
                              status=404, code="object_not_found")
        return copy.deepcopy(self._children[block_id])

    # Filter and sort evaluation

    @staticmethod
    def _property_value(page: Dict[str, Any], name: str, prop_type: str) -> Any:
        prop = page.get("properties", {}).get(name)
        if not isinstance(prop, Mapping) or prop.get("type") != prop_type:
            return None
        return prop.get(prop_type)

    @classmethod
    def _date_start(cls, page: Dict[str, Any], name: str) -> Optional[str]:
        value = cls._property_value(page, name, "date")
        if isinstance(value, Mapping) and value.get("start"):
            return value["start"][:10]
        return None

    @classmethod
    def _matches(cls, page: Dict[str, Any], condition: Dict[str, Any]) -> bool:
        if "and" in condition:
            return all(cls._matches(page, sub) for sub in condition["and"])
        if "or" in condition:
            return any(cls._matches(page, sub) for sub in condition["or"])

        name = condition.get("property")
        if "checkbox" in condition:
            return cls._property_value(page, name, "checkbox") is condition["checkbox"].get("equals")
        if "date" in condition:
            start = cls._date_start(page, name)
            if start is None:
                return False
            bounds = condition["date"]
            if "on_or_after" in bounds and start < bounds["on_or_after"]:
                return False
            if "before" in bounds and start >= bounds["before"]:
                return False
            return True
        if "multi_select" in condition:
            options = cls._property_value(page, name, "multi_select") or []
            return condition["multi_select"].get("contains") in [option.get("name") for option in options]

        raise ValueError(f"Unsupported filter condition: {condition}")

    @classmethod
    def _sorted(cls, pages: List[Dict[str, Any]], sort: Dict[str, Any]) -> List[Dict[str, Any]]:
        name = sort["property"]
        with_value = [page for page in pages if cls._date_start(page, name) is not None]
        without_value = [page for page in pages if cls._date_start(page, name) is None]
        with_value.sort(key=lambda page: cls._date_start(page, name),
                        reverse=sort.get("direction") == "descending")
        # Pages with an empty sort property always come last
        return with_value + without_value

    @classmethod
    def sample(cls) -> "MockPageSource":
        """
        Create a source populated with demo posts and reading notes.

        Returns:
            A MockPageSource using POSTS_COLLECTION and NOTES_COLLECTION
        """
        source = cls()

        source.add_page(POSTS_COLLECTION, sample_page(
            "post-2025-launch",
            title="Launching the new blog",
            published=True,
            published_at="2025-03-14",
            thumbnail={"type": "external", "external": {"url": "https://images.example.com/launch.png"}},
        ), children=[
            sample_block("heading_1", [sample_span("Hello again")]),
            sample_block("paragraph", [
                sample_span("This blog now renders straight from "),
                sample_span("Notion", bold=True, href="https://www.notion.so"),
                sample_span("."),
            ]),
            {"object": "block", "id": "divider-1", "type": "divider", "divider": {}},
            sample_block("code", [sample_span("print('hi')"), sample_span("\n"), sample_span("print('bye')")],
                         language="python"),
        ])

        source.add_page(POSTS_COLLECTION, sample_page(
            "post-2024-notes",
            title="Notes from 2024",
            published=True,
            published_at="2024-11-02",
        ), children=[
            sample_block("bulleted_list_item", [sample_span("Read more books")]),
            sample_block("bulleted_list_item", [sample_span("Write more posts")]),
            sample_block("quote", [sample_span("Done is better than perfect.", italic=True)]),
        ])

        source.add_page(POSTS_COLLECTION, sample_page(
            "post-draft",
            title="Unfinished draft",
            published=False,
        ), children=[
            sample_block("paragraph", [sample_span("TBD")]),
        ])

        source.add_page(NOTES_COLLECTION, sample_note(
            "note-pragmatic",
            title="The Pragmatic Programmer",
            topics=["プログラミング", "技術書"],
            created_at="2024-05-22",
            is_public=True,
        ), children=[
            sample_block("numbered_list_item", [sample_span("Always use version control.")]),
            {
                "object": "block", "id": "img-1", "type": "image",
                "image": {
                    "type": "file",
                    "file": {"url": "https://files.example.com/cover.jpg?X-Amz-Signature=abc",
                             "expiry_time": "2025-01-01T00:00:00.000Z"},
                    "caption": [sample_span("Cover")],
                },
            },
        ])

        source.add_page(NOTES_COLLECTION, sample_note(
            "note-design",
            title="Domain-Driven Design",
            topics=["設計", "技術書"],
            created_at="2024-06-01",
            is_public=True,
        ), children=[
            sample_block("paragraph", [sample_span("Ubiquitous language matters.")]),
        ])

        source.add_page(NOTES_COLLECTION, sample_note(
            "note-private",
            title="Private thoughts",
            topics=["日記"],
            created_at="2024-06-10",
            is_public=False,
        ), children=[
            sample_block("paragraph", [sample_span("Not for publishing.")]),
        ])

        return source


def sample_span(text: str, href: Optional[str] = None, **annotations: bool) -> Dict[str, Any]:
    """Build a source rich-text item."""
    return {
        "type": "text",
        "text": {"content": text, "link": {"url": href} if href else None},
        "annotations": {
            "bold": annotations.get("bold", False),
            "italic": annotations.get("italic", False),
            "strikethrough": annotations.get("strikethrough", False),
            "underline": annotations.get("underline", False),
            "code": annotations.get("code", False),
            "color": "default",
        },
        "plain_text": text,
        "href": href,
    }


def sample_block(block_type: str, rich_text: List[Dict[str, Any]], **extra: Any) -> Dict[str, Any]:
    """Build a source block whose payload holds a rich_text list."""
    payload = {"rich_text": rich_text, "color": "default"}
    payload.update(extra)
    return {
        "object": "block",
        "id": f"{block_type}-{next(_block_ids)}",
        "has_children": False,
        "archived": False,
        "type": block_type,
        block_type: payload,
    }


def _title_property(title: str) -> Dict[str, Any]:
    return {"id": "title", "type": "title", "title": [sample_span(title)] if title else []}


def _date_property(name: str, start: Optional[str]) -> Dict[str, Any]:
    return {"id": name, "type": "date",
            "date": {"start": start, "end": None, "time_zone": None} if start else None}


def sample_page(page_id: str, title: str = "", published: bool = False,
                published_at: Optional[str] = None,
                thumbnail: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a source page shaped like a record of the posts collection."""
    return {
        "object": "page",
        "id": page_id,
        "properties": {
            "title": _title_property(title),
            "published": {"id": "published", "type": "checkbox", "checkbox": published},
            "published_at": _date_property("published_at", published_at),
            "thumbnail": {"id": "thumbnail", "type": "files",
                          "files": [dict(thumbnail, name="thumbnail")] if thumbnail else []},
        },
    }


def sample_note(page_id: str, title: str = "", topics: Optional[List[str]] = None,
                created_at: Optional[str] = None, is_public: bool = False) -> Dict[str, Any]:
    """Build a source page shaped like a record of the reading notes collection."""
    return {
        "object": "page",
        "id": page_id,
        "properties": {
            "title": _title_property(title),
            "topic": {"id": "topic", "type": "multi_select",
                      "multi_select": [{"id": str(i), "name": name, "color": "default"}
                                       for i, name in enumerate(topics or [])]},
            "created_at": _date_property("created_at", created_at),
            "is_public": {"id": "is_public", "type": "checkbox", "checkbox": is_public},
        },
    }
