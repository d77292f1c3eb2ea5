"""Command-line interface for the feed_pager application."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import pprint
from pathlib import Path
from typing import List, Optional

from .config import RENDER_ERROR_MODES, AppConfig, load_config
from .exceptions import FeedPagerError
from .feeds import load_feeds, load_snapshot, save_snapshot
from .models import FeedCollection
from .rendering import fail_fast, plain_text_fallback
from .session import Session
from .terminal import run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Page through RSS and Atom feeds in the terminal."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the configuration XML file. Searched for when omitted.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Path to the log file. Overrides config.",
    )
    parser.add_argument(
        "--on-render-error",
        choices=RENDER_ERROR_MODES,
        default=None,
        help="Abort on an entry that cannot be rendered, or show it as plain text.",
    )
    parser.add_argument(
        "--save-feeds",
        metavar="PATH",
        help="Write the fetched feeds to PATH as JSON before starting the pager.",
    )
    parser.add_argument(
        "--load-feeds",
        metavar="PATH",
        help="Load feeds from a JSON snapshot at PATH instead of fetching them.",
    )
    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Initialise logging; with a log file nothing is written to the terminal."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(
            "Logger initialised with level %s and file output to %s",
            level_name.upper(),
            log_path,
        )
    else:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)
        logger.debug(
            "Logger initialised with console output at level %s", level_name.upper()
        )


def collect_feeds(config: AppConfig, load_path: Optional[str] = None) -> FeedCollection:
    if load_path:
        return load_snapshot(load_path)
    return load_feeds(
        config.feeds, timeout=config.fetch_timeout, concurrency=config.concurrency
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)

        log_level = args.log_level or config.logging.level
        log_file = args.log_file or config.logging.file
        configure_logging(log_level, log_file)

        if args.on_render_error:
            config.render_errors = args.on_render_error

        logger.info("Active Configuration:\n%s", pprint.pformat(dataclasses.asdict(config)))

        feeds = collect_feeds(config, args.load_feeds)
        if args.save_feeds:
            save_snapshot(args.save_feeds, feeds)

        policy = plain_text_fallback if config.render_errors == "fallback" else fail_fast
        run(Session(feeds, config.style, on_error=policy))
    except ValueError as exc:
        parser.error(str(exc))
    except (FeedPagerError, RuntimeError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    return 0
