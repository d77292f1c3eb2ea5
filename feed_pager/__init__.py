"""Terminal pager for pre-fetched syndication feeds."""

from .models import Feed, FeedConfig, Item, StyleConfig
from .session import Session

__all__ = [
    "Feed",
    "FeedConfig",
    "Item",
    "Session",
    "StyleConfig",
]
