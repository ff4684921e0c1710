"""Text store access."""

from .search import TextSearchItem, TextSearchResponse, TextStoreGateway

__all__ = ["TextSearchItem", "TextSearchResponse", "TextStoreGateway"]
