"""Configuration loading for feed_pager."""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional
from xml.etree import ElementTree as ET

from .models import FeedConfig, StyleConfig

logger = logging.getLogger(__name__)

CONFIG_NAME = "feed-pager.xml"
ENV_PREFIX = "FEEDPAGER_"
DEFAULT_FEED_URLS = ("https://github.com/homielabs.atom",)
RENDER_ERROR_MODES = ("fail", "fallback")

# Style fields that may be overridden from the environment, keyed by the
# element name used in the config file.
_STYLE_FIELDS = {
    "accent": "accent",
    "text-color": "text_color",
    "background-color": "background_color",
    "horizontal-padding": "horizontal_padding",
    "vertical-padding": "vertical_padding",
}
_INT_FIELDS = {"horizontal_padding", "vertical_padding"}


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = "feed-pager.log"


@dataclass
class AppConfig:
    feeds: List[FeedConfig] = field(
        default_factory=lambda: [
            FeedConfig(category="Default", title=url, url=url)
            for url in DEFAULT_FEED_URLS
        ]
    )
    style: StyleConfig = field(default_factory=StyleConfig)
    fetch_timeout: float = 15.0
    concurrency: int = 4
    render_errors: str = "fail"
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def default_search_paths() -> List[Path]:
    """Locations checked, in order, when no config file is given."""
    return [
        Path.cwd() / CONFIG_NAME,
        Path.home() / ".config" / "feed-pager" / CONFIG_NAME,
        Path("/etc/feed-pager") / CONFIG_NAME,
    ]


def find_config_file(explicit: Optional[str] = None) -> Optional[Path]:
    """Return the config file to load, or None to run on defaults."""
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit}")
        return path
    for candidate in default_search_paths():
        if candidate.is_file():
            return candidate
    logger.info("Found no configs on disk; using defaults")
    return None


def parse_feeds_config(path: str) -> List[FeedConfig]:
    """Parse the OPML configuration file and return feed definitions."""
    logger.info("Loading feed configuration from %s", path)
    tree = ET.parse(path)
    root = tree.getroot()
    body = root.find("body")
    feeds: List[FeedConfig] = []

    def walk(outline: ET.Element, current_category: Optional[str]) -> None:
        title = outline.attrib.get("title") or outline.attrib.get("text")
        feed_url = outline.attrib.get("xmlUrl")
        outline_type = outline.attrib.get("type")

        if outline_type in ("rss", "atom") and feed_url:
            feeds.append(
                FeedConfig(
                    category=current_category or title or "Uncategorized",
                    title=title or feed_url,
                    url=feed_url,
                )
            )
            logger.debug(
                "Registered feed '%s' (category='%s')", feed_url, feeds[-1].category
            )
            return

        next_category = title if title else current_category
        for child in outline.findall("outline"):
            walk(child, next_category)

    if body is None:
        raise ValueError(f"{path} is missing the <body> section.")

    for outline in body.findall("outline"):
        walk(outline, outline.attrib.get("title") or outline.attrib.get("text"))

    logger.info("Loaded %d feed endpoints from configuration", len(feeds))
    return feeds


def _resolve_path(base_path: Path, target_path: str) -> str:
    """Resolve a path relative to the base config file if it's not absolute."""
    target = Path(target_path)
    if target.is_absolute():
        return str(target)
    return str((base_path.parent / target).resolve())


def _parse_padding(name: str, raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def apply_style_overrides(style: StyleConfig, values: Mapping[str, str]) -> StyleConfig:
    """Return ``style`` updated from element-named string values."""
    changes = {}
    for name, attribute in _STYLE_FIELDS.items():
        raw = values.get(name)
        if raw is None or not raw.strip():
            continue
        if attribute in _INT_FIELDS:
            changes[attribute] = _parse_padding(name, raw)
        else:
            changes[attribute] = raw.strip()
    return dataclasses.replace(style, **changes) if changes else style


def style_from_environment(
    style: StyleConfig, environ: Optional[Mapping[str, str]] = None
) -> StyleConfig:
    """Apply FEEDPAGER_* environment variables on top of ``style``."""
    environ = os.environ if environ is None else environ
    values = {}
    for name in _STYLE_FIELDS:
        key = ENV_PREFIX + name.upper().replace("-", "_")
        if key in environ:
            values[name] = environ[key]
    if values:
        logger.debug("Style overrides from environment: %s", sorted(values))
    return apply_style_overrides(style, values)


def _parse_feeds_node(node: ET.Element, config_path: Path) -> List[FeedConfig]:
    urls = [url.text.strip() for url in node.findall("url") if url.text and url.text.strip()]
    if urls:
        return [FeedConfig(category="Default", title=url, url=url) for url in urls]
    if node.text and node.text.strip():
        return parse_feeds_config(_resolve_path(config_path, node.text.strip()))
    raise ValueError("Config <feeds> must name an OPML file or contain <url> elements")


def parse_app_config(path: Optional[str]) -> AppConfig:
    """Parse the application configuration XML, or return defaults for None."""
    config = AppConfig()
    if path is None:
        return config

    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    root = ET.parse(config_path).getroot()

    feeds_node = root.find("feeds")
    if feeds_node is not None:
        config.feeds = _parse_feeds_node(feeds_node, config_path)

    style_node = root.find("style")
    if style_node is not None:
        values = {name: style_node.findtext(name) for name in _STYLE_FIELDS}
        config.style = apply_style_overrides(
            config.style, {k: v for k, v in values.items() if v is not None}
        )

    config.fetch_timeout = float(root.findtext("fetch-timeout", "15"))
    config.concurrency = int(root.findtext("concurrency", "4"))

    render_errors = root.findtext("render-errors", "fail").strip().lower()
    if render_errors not in RENDER_ERROR_MODES:
        raise ValueError(f"Unsupported render-errors mode: {render_errors}")
    config.render_errors = render_errors

    log_node = root.find("logging")
    if log_node is not None:
        config.logging.level = log_node.findtext("level", "INFO")
        log_file = log_node.findtext("file")
        if log_file:
            config.logging.file = _resolve_path(config_path, log_file)

    return config


def load_config(
    explicit: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> AppConfig:
    """Find, parse and environment-adjust the application configuration."""
    found = find_config_file(explicit)
    config = parse_app_config(str(found) if found else None)
    config.style = style_from_environment(config.style, environ)
    return config
