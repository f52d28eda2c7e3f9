"""Page sources: adapters to the external document database."""

from .base import BasePageSource, SourceError
from .mock import MockPageSource
from .notion import NotionPageSource

__all__ = ["BasePageSource", "SourceError", "MockPageSource", "NotionPageSource"]
