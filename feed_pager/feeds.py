"""Feed fetching, parsing and offline snapshots."""

from __future__ import annotations

import calendar
import concurrent.futures
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import feedparser
import requests

from .exceptions import FeedFetchError
from .models import Feed, FeedCollection, FeedConfig, Item

logger = logging.getLogger(__name__)


def to_datetime(value: Optional[time.struct_time]) -> Optional[datetime]:
    """Convert feedparser's UTC struct_time values to aware datetimes."""
    if value is None:
        return None
    return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)


def _entry_content(entry: Any) -> str:
    content = getattr(entry, "content", None)
    if not content:
        return ""
    try:
        return content[0].get("value") or ""
    except (TypeError, KeyError, IndexError, AttributeError):
        return ""


def _entry_authors(entry: Any) -> tuple:
    names = []
    for author in getattr(entry, "authors", None) or []:
        name = author.get("name") if hasattr(author, "get") else None
        if name:
            names.append(name)
    if not names and getattr(entry, "author", None):
        names.append(entry.author)
    return tuple(names)


def entry_to_item(entry: Any) -> Item:
    """Map a feedparser entry onto an :class:`Item`."""
    return Item(
        title=getattr(entry, "title", None) or "",
        description=getattr(entry, "summary", None) or "",
        content=_entry_content(entry),
        authors=_entry_authors(entry),
        published=to_datetime(getattr(entry, "published_parsed", None)),
        updated=to_datetime(getattr(entry, "updated_parsed", None)),
        link=getattr(entry, "link", None) or "",
    )


def fetch_feed(feed: FeedConfig, timeout: float = 15.0) -> Feed:
    """Download and parse a single feed."""
    logger.info("Fetching feed '%s' (%s)", feed.title, feed.url)
    try:
        response = requests.get(feed.url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FeedFetchError(f"Failed to fetch feed {feed.url}: {exc}") from exc

    parsed = feedparser.parse(response.content)
    if getattr(parsed, "bozo", False) and not parsed.entries:
        raise FeedFetchError(
            f"Failed to parse feed {feed.url}: {getattr(parsed, 'bozo_exception', '')}"
        )

    items = tuple(entry_to_item(entry) for entry in parsed.entries)
    title = parsed.feed.get("title") if hasattr(parsed, "feed") else None
    logger.info("Collected %d entries from feed '%s'", len(items), feed.url)
    return Feed(title=title or feed.title, items=items)


def load_feeds(
    configs: Sequence[FeedConfig], timeout: float = 15.0, concurrency: int = 4
) -> FeedCollection:
    """Fetch every configured feed, keeping the configured order."""
    if not configs:
        return ()
    with concurrent.futures.ThreadPoolExecutor(
        max_workers=max(concurrency, 1)
    ) as executor:
        feeds = list(executor.map(lambda cfg: fetch_feed(cfg, timeout), configs))
    logger.info("Loaded %d feeds", len(feeds))
    return tuple(feeds)


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _item_to_dict(item: Item) -> Dict[str, Any]:
    return {
        "title": item.title,
        "description": item.description,
        "content": item.content,
        "authors": list(item.authors),
        "published": _timestamp(item.published),
        "updated": _timestamp(item.updated),
        "link": item.link,
    }


def _item_from_dict(payload: Dict[str, Any]) -> Item:
    return Item(
        title=payload.get("title", ""),
        description=payload.get("description", ""),
        content=payload.get("content", ""),
        authors=tuple(payload.get("authors") or ()),
        published=_parse_timestamp(payload.get("published")),
        updated=_parse_timestamp(payload.get("updated")),
        link=payload.get("link", ""),
    )


def save_snapshot(path: str, feeds: FeedCollection) -> None:
    """Write ``feeds`` to ``path`` as JSON."""
    location = Path(path)
    if location.parent and not location.parent.exists():
        location.parent.mkdir(parents=True, exist_ok=True)

    payload = [
        {"title": feed.title, "items": [_item_to_dict(item) for item in feed.items]}
        for feed in feeds
    ]
    location.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    logger.info("Saved %d feeds to %s", len(payload), location)


def load_snapshot(path: str) -> FeedCollection:
    """Read a feed collection previously written by :func:`save_snapshot`."""
    location = Path(path)
    try:
        payload = json.loads(location.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise RuntimeError(f"Feed snapshot not found: {location}") from exc
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Feed snapshot is not valid JSON: {location}") from exc

    if not isinstance(payload, list):
        raise RuntimeError("Feed snapshot must contain a JSON array.")

    feeds: List[Feed] = []
    for entry in payload:
        if not isinstance(entry, dict):
            raise RuntimeError("Feed snapshot must contain objects only.")
        items = tuple(_item_from_dict(item) for item in entry.get("items", []))
        feeds.append(Feed(title=entry.get("title", ""), items=items))

    logger.info("Loaded %d feeds from %s", len(feeds), location)
    return tuple(feeds)
