"""
Notion page source for notefeed.

This module adapts the official Notion SDK's async client to the
BasePageSource interface, following pagination cursors so callers always see
complete result lists.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from notion_client import AsyncClient
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from notion_client.helpers import async_collect_paginated_api

from ..config import ConfigManager, config as default_config
from .base import BasePageSource, SourceError


class NotionPageSource(BasePageSource):
    """
    Page source backed by the Notion API.
    """

    def __init__(self, auth: Optional[str] = None, client: Optional[AsyncClient] = None,
                 config: Optional[ConfigManager] = None):
        """
        Initialize the Notion page source.

        Args:
            auth: Integration secret (defaults to the configured environment variable)
            client: Preconfigured AsyncClient, mainly for tests
            config: Configuration manager (defaults to the global instance)
        """
        self.config = config or default_config
        self.page_size = self.config.page_size

        if client is None:
            token = auth or self.config.notion_auth
            if not token:
                logging.warning("No Notion secret configured; requests will fail authentication")
            client = AsyncClient(auth=token, timeout_ms=int(self.config.notion_timeout * 1000))
        self.client = client

        logging.info("Initialized Notion page source")

    async def _call(self, operation: str, coroutine):
        try:
            return await coroutine
        except HTTPResponseError as e:
            raise SourceError(operation, str(e), status=e.status,
                              code=getattr(e, "code", None)) from e
        except RequestTimeoutError as e:
            raise SourceError(operation, "request timed out", code="timeout") from e
        except httpx.HTTPError as e:
            raise SourceError(operation, str(e)) from e

    async def query_pages(self, collection_id: str, filter: Optional[Dict[str, Any]] = None,
                          sorts: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        kwargs: Dict[str, Any] = {"database_id": collection_id, "page_size": self.page_size}
        if filter is not None:
            kwargs["filter"] = filter
        if sorts is not None:
            kwargs["sorts"] = sorts

        results = await self._call(
            "query_pages",
            async_collect_paginated_api(self.client.databases.query, **kwargs),
        )
        logging.debug(f"Collection {collection_id} returned {len(results)} records")
        return results

    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        return await self._call("retrieve_page", self.client.pages.retrieve(page_id=page_id))

    async def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        return await self._call(
            "list_block_children",
            async_collect_paginated_api(
                self.client.blocks.children.list, block_id=block_id, page_size=self.page_size
            ),
        )

    async def aclose(self) -> None:
        await self.client.aclose()
