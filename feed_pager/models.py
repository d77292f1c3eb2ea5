"""Shared data models for feed_pager."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class FeedConfig:
    """Configuration for a single RSS feed."""

    category: str
    title: str
    url: str


@dataclass(frozen=True)
class StyleConfig:
    """Colors and padding used when composing frames."""

    accent: str = "33"
    text_color: str = "15"
    background_color: str = "233"
    horizontal_padding: int = 2
    vertical_padding: int = 0

    def __post_init__(self) -> None:
        if self.horizontal_padding < 0 or self.vertical_padding < 0:
            raise ValueError("Padding must be a non-negative number of cells.")


@dataclass(frozen=True)
class Item:
    """A single feed entry as shown in the pager."""

    title: str
    description: str = ""
    content: str = ""
    authors: Tuple[str, ...] = ()
    published: Optional[datetime] = None
    updated: Optional[datetime] = None
    link: str = ""

    def last_updated(self) -> datetime:
        """Return the most authoritative timestamp, or the Unix epoch."""
        if self.updated is not None:
            return self.updated
        if self.published is not None:
            return self.published
        return EPOCH


@dataclass(frozen=True)
class Feed:
    """A titled, ordered collection of items."""

    title: str
    items: Tuple[Item, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.items)


FeedCollection = Tuple[Feed, ...]
