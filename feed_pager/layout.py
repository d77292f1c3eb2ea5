"""Compose header, body and footer into a single terminal frame."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.style import Style
from rich.text import Text

from .models import EPOCH, StyleConfig
from .navigation import KEY_BINDINGS, SCROLL_ACTIONS, Action, Navigator
from .rendering import COLOR_SYSTEM
from .viewport import Viewport

HEADER_HEIGHT = 3
FOOTER_HEIGHT = 3

LOADING = "\n Loading content"
NO_TITLE = "No content"
BORDER = "│"
HELP_SEPARATOR = "    "

_MOVES = frozenset({Action.MOVE_LEFT, Action.MOVE_RIGHT})


def terminal_color(value: str) -> str:
    """Translate a 256-palette index or hex value into a rich color name."""
    value = value.strip()
    if value.isdigit():
        return f"color({int(value)})"
    return value


def to_ansi(text: Text) -> str:
    """Render ``text`` as a single ANSI-styled string without wrapping."""
    console = Console(
        width=max(text.cell_len, 1),
        force_terminal=True,
        color_system=COLOR_SYSTEM,
        legacy_windows=False,
        highlight=False,
    )
    with console.capture() as capture:
        console.print(text, end="", soft_wrap=True)
    return capture.get()


def visible_width(rendered: str) -> int:
    """Number of terminal cells an ANSI-styled line occupies."""
    return Text.from_ansi(rendered).cell_len


def _padded(value: str, padding: int, style: Style) -> Text:
    return Text(" " * padding + value + " " * padding, style=style)


def block_heights(height: int) -> Tuple[int, int, int]:
    """Split a terminal height into header, body and footer rows.

    When the terminal is shorter than the two fixed blocks, the footer gives
    up rows first, then the header.
    """
    height = max(height, 0)
    header = min(HEADER_HEIGHT, height)
    footer = min(FOOTER_HEIGHT, height - header)
    return header, height - header - footer, footer


def _fit_header(lines: List[str], title_row: int, height: int) -> List[str]:
    if height <= 0:
        return []
    if len(lines) <= height:
        return lines + [""] * (height - len(lines))
    # Trim padding evenly so the title row always survives.
    start = min(max(title_row - (height - 1) // 2, 0), len(lines) - height)
    return lines[start : start + height]


def _fit_footer(lines: List[str], height: int) -> List[str]:
    if height <= 0:
        return []
    if len(lines) >= height:
        return lines[-height:]
    return [""] * (height - len(lines)) + lines


def header_lines(title: str, style: StyleConfig, width: int) -> List[Text]:
    """The title bar, including any vertical padding rows."""
    bar_style = Style(
        bold=True,
        color=terminal_color(style.text_color),
        bgcolor=terminal_color(style.accent),
    )
    pad = style.horizontal_padding
    label = Text(title)
    label.truncate(max(width - 2 * pad, 0), overflow="ellipsis")
    bar = _padded(label.plain, pad, bar_style)
    bar.truncate(max(width, 0))
    blank = Text(" " * bar.cell_len, style=bar_style)
    rows = [blank.copy() for _ in range(style.vertical_padding)]
    return rows + [bar] + [blank.copy() for _ in range(style.vertical_padding)]


def format_counter(item_index: int, item_count: int) -> str:
    """One-based position over total, e.g. ``2/5 articles``."""
    if item_count <= 0:
        return "0/0 articles"
    return f"{item_index + 1}/{item_count} articles"


def format_timestamp(moment: datetime) -> str:
    return "Last updated " + moment.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")


def footer_segments(
    scroll_percent: float,
    counter: str,
    authors: Sequence[str],
    updated: datetime,
    style: StyleConfig,
    width: int,
) -> List[Text]:
    """Return percent, counter, filler, authors and time segments in order."""
    background = terminal_color(style.background_color)
    foreground = terminal_color(style.text_color)
    pad = style.horizontal_padding
    base = Style(bgcolor=background)
    border = Text(BORDER, style=Style(color=foreground))

    percent = _padded(
        f"{scroll_percent * 100:3.0f}%",
        pad,
        base + Style(bold=True, color=foreground, bgcolor=terminal_color(style.accent)),
    )
    count = _padded(counter, pad, base)
    author_text = Text.assemble(border, _padded(", ".join(authors), pad, base))
    time_text = Text.assemble(border, _padded(format_timestamp(updated), pad, base))

    consumed = sum(part.cell_len for part in (percent, count, author_text, time_text))
    filler = Text(" " * max(width - consumed, 0), style=base)
    return [percent, count, filler, author_text, time_text]


def compose_footer(
    scroll_percent: float,
    counter: str,
    authors: Sequence[str],
    updated: datetime,
    style: StyleConfig,
    width: int,
) -> Text:
    return Text.assemble(
        *footer_segments(scroll_percent, counter, authors, updated, style, width)
    )


def help_lines() -> List[Text]:
    """Key binding help laid out in two columns."""
    columns = [
        [b for b in KEY_BINDINGS if b.action in SCROLL_ACTIONS or b.action in _MOVES],
        [b for b in KEY_BINDINGS if b.action not in SCROLL_ACTIONS and b.action not in _MOVES],
    ]
    key_style = Style(color="color(250)", bold=True)
    text_style = Style(color="color(244)")

    rendered: List[List[Text]] = []
    for column in columns:
        key_width = max(len(binding.help_key) for binding in column)
        rendered.append(
            [
                Text.assemble(
                    (binding.help_key.ljust(key_width), key_style),
                    " ",
                    (binding.help_text, text_style),
                )
                for binding in column
            ]
        )

    widths = [max(line.cell_len for line in column) for column in rendered]
    rows = max(len(column) for column in rendered)
    lines = []
    for row in range(rows):
        parts = []
        for column, column_width in zip(rendered, widths):
            cell = column[row].copy() if row < len(column) else Text("")
            cell.pad_right(column_width - cell.cell_len)
            parts.append(cell)
        line = Text(HELP_SEPARATOR).join(parts)
        line.rstrip()
        lines.append(line)
    return lines


def _join(lines: Iterable[str]) -> str:
    return "\n".join(lines)


def compose_frame(
    navigator: Navigator,
    viewport: Viewport,
    style: StyleConfig,
    height: Optional[int] = None,
) -> str:
    """Produce the complete frame for the current session state.

    ``height`` is the terminal height; it defaults to the viewport height
    plus the full header and footer blocks.
    """
    state = navigator.state
    if not state.ready:
        return LOADING
    if state.help_visible:
        lines = help_lines()
        if viewport.width:
            for line in lines:
                line.truncate(viewport.width)
        return _join(to_ansi(line) for line in lines)

    if height is None:
        height = HEADER_HEIGHT + viewport.height + FOOTER_HEIGHT
    header_rows, body_rows, footer_rows = block_heights(height)

    width = viewport.width
    item = navigator.current_item
    if item is not None:
        title, authors, updated = item.title, item.authors, item.last_updated()
    else:
        title, authors, updated = NO_TITLE, (), EPOCH

    header = []
    for line in header_lines(title, style, width):
        line.pad_right(max(width - line.cell_len, 0))
        header.append(to_ansi(line))

    footer = compose_footer(
        viewport.scroll_percent(),
        format_counter(state.item_index, navigator.item_count),
        authors,
        updated,
        style,
        width,
    )
    footer.truncate(width)
    return _join(
        _fit_header(header, style.vertical_padding, header_rows)
        + viewport.view()[:body_rows]
        + _fit_footer([to_ansi(footer)], footer_rows)
    )
