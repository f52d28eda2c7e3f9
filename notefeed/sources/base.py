"""
Base page source interface for notefeed.

This module defines the abstract interface to the external document database.
The content service only ever talks to a source through these three reads.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class SourceError(Exception):
    """
    Raised when the external source cannot answer a request.

    Covers network failures, authentication and rate-limit errors, and unknown
    identifiers alike.
    """

    def __init__(self, operation: str, message: str, status: Optional[int] = None,
                 code: Optional[str] = None):
        self.operation = operation
        self.status = status
        self.code = code
        super().__init__(f"{operation} failed: {message}")


class BasePageSource(ABC):
    """
    Abstract base class for page sources.

    Each source returns raw records in the source API's JSON shape; parsing
    them is the caller's job.
    """

    @abstractmethod
    async def query_pages(self, collection_id: str, filter: Optional[Dict[str, Any]] = None,
                          sorts: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        """
        Query a collection for pages.

        Args:
            collection_id: Identifier of the collection to query
            filter: Property filter in the source API's filter syntax
            sorts: Sort directives in the source API's syntax

        Returns:
            Every matching record across all result pages

        Raises:
            SourceError: If the query cannot be completed
        """
        pass

    @abstractmethod
    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        """
        Retrieve one page's properties.

        Raises:
            SourceError: If the page does not exist or cannot be retrieved
        """
        pass

    @abstractmethod
    async def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        """
        List the ordered child blocks of a page or block.

        Raises:
            SourceError: If the children cannot be listed
        """
        pass

    async def aclose(self) -> None:
        """Release any held resources."""
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
