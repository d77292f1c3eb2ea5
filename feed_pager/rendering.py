"""Turn feed items into styled terminal text."""

from __future__ import annotations

import html
import logging
import textwrap
from typing import Callable, Optional

import html2text
from bs4 import BeautifulSoup
from rich.console import Console
from rich.markdown import Markdown

from .exceptions import ContentError, ConversionError, RenderError
from .models import Feed, Item

logger = logging.getLogger(__name__)

NO_CONTENT = "No content here!"

# Used for both the rendered body and the frame chrome.
COLOR_SYSTEM = "truecolor"

# html2text turns <hr> into a markdown rule, which marks where the
# description ends and the full content begins.
SECTION_SEPARATOR = "<hr>"

ErrorPolicy = Callable[[Item, int, ContentError], str]


def decode_entities(fragment: str) -> str:
    """Unescape HTML entities such as &amp; and &#8217;."""
    return html.unescape(fragment)


def html_to_markdown(fragment: str) -> str:
    """Convert an HTML fragment to markdown."""
    converter = html2text.HTML2Text()
    converter.body_width = 0
    converter.unicode_snob = True
    converter.ignore_images = False
    try:
        return converter.handle(fragment)
    except Exception as exc:
        raise ConversionError(f"Could not convert HTML to markdown: {exc}") from exc


def render_markdown(markdown: str, width: int) -> str:
    """Render markdown to ANSI-styled text wrapped to ``width`` cells."""
    console = Console(
        width=max(width, 1),
        force_terminal=True,
        color_system=COLOR_SYSTEM,
        legacy_windows=False,
        highlight=False,
    )
    try:
        with console.capture() as capture:
            console.print(Markdown(markdown, code_theme="monokai"))
    except Exception as exc:
        raise RenderError(f"Could not render markdown: {exc}") from exc
    return capture.get()


def fail_fast(item: Item, width: int, error: ContentError) -> str:
    """Default policy: propagate the failure to the caller."""
    raise error


def plain_text_fallback(item: Item, width: int, error: ContentError) -> str:
    """Recoverable policy: show the item as wrapped plain text."""
    logger.warning("Falling back to plain text for '%s': %s", item.title, error)
    paragraphs = []
    for fragment in (item.description, item.content):
        if not fragment:
            continue
        soup = BeautifulSoup(decode_entities(fragment), "html.parser")
        text = soup.get_text(separator="\n", strip=True)
        for block in text.splitlines():
            paragraphs.append(textwrap.fill(block, width=max(width, 1)))
    return "\n\n".join(paragraphs) + "\n"


def render_item(item: Item, width: int, on_error: Optional[ErrorPolicy] = None) -> str:
    """Run the decode, convert and render stages for ``item``."""
    policy = on_error or fail_fast
    try:
        decoded = decode_entities(item.description + SECTION_SEPARATOR + item.content)
        markdown = html_to_markdown(decoded)
        return render_markdown(markdown, width)
    except ContentError as exc:
        return policy(item, width, exc)


def render_selection(
    feed: Optional[Feed],
    index: int,
    width: int,
    on_error: Optional[ErrorPolicy] = None,
) -> str:
    """Render the item at ``index`` of ``feed`` or the empty placeholder."""
    if feed is None or not 0 <= index < len(feed):
        return NO_CONTENT
    item = feed.items[index]
    logger.debug("Rendering '%s' at width %d", item.title, width)
    return render_item(item, width, on_error)
