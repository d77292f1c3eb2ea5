"""Scrollable window over rendered content."""

from __future__ import annotations

from typing import List


class Viewport:
    """Holds rendered lines and the current vertical scroll offset."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)
        self.lines: List[str] = []
        self.y_offset = 0

    @property
    def max_offset(self) -> int:
        return max(0, len(self.lines) - self.height)

    def set_content(self, text: str) -> None:
        """Replace the content and scroll back to the top."""
        self.lines = text.rstrip("\n").split("\n") if text else []
        self.y_offset = 0

    def resize(self, width: int, height: int) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)
        self._clamp()

    def scroll_by(self, delta: int) -> None:
        self.y_offset += delta
        self._clamp()

    def line_up(self, count: int = 1) -> None:
        self.scroll_by(-count)

    def line_down(self, count: int = 1) -> None:
        self.scroll_by(count)

    def page_up(self) -> None:
        self.scroll_by(-max(self.height, 1))

    def page_down(self) -> None:
        self.scroll_by(max(self.height, 1))

    def half_page_up(self) -> None:
        self.scroll_by(-max(self.height // 2, 1))

    def half_page_down(self) -> None:
        self.scroll_by(max(self.height // 2, 1))

    def goto_top(self) -> None:
        self.y_offset = 0

    def goto_bottom(self) -> None:
        self.y_offset = self.max_offset

    def scroll_percent(self) -> float:
        """Fraction of the content scrolled past, between 0 and 1."""
        if self.max_offset == 0:
            return 0.0
        return min(max(self.y_offset / self.max_offset, 0.0), 1.0)

    def view(self) -> List[str]:
        """Return exactly ``height`` lines, padding with blanks."""
        visible = self.lines[self.y_offset : self.y_offset + self.height]
        return visible + [""] * (self.height - len(visible))

    def _clamp(self) -> None:
        self.y_offset = min(max(self.y_offset, 0), self.max_offset)
