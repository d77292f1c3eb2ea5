"""The interactive reading session: one event in, one frame out."""

from __future__ import annotations

import logging
from typing import Optional

from .layout import block_heights, compose_frame
from .models import FeedCollection, StyleConfig
from .navigation import (
    SCROLL_ACTIONS,
    Action,
    Event,
    KeyEvent,
    NavigationState,
    Navigator,
    ResizeEvent,
    action_for_key,
)
from .rendering import ErrorPolicy, fail_fast, render_selection
from .viewport import Viewport

logger = logging.getLogger(__name__)


class Session:
    """Ties navigation, rendering, the viewport and layout together.

    Every call to :meth:`dispatch` runs to completion before returning, so
    events are handled strictly one at a time.
    """

    def __init__(
        self,
        feeds: FeedCollection,
        style: Optional[StyleConfig] = None,
        on_error: ErrorPolicy = fail_fast,
    ) -> None:
        self.style = style or StyleConfig()
        self.navigator = Navigator(feeds)
        self.viewport = Viewport()
        self.height = 0
        self.on_error = on_error

    @property
    def state(self) -> NavigationState:
        return self.navigator.state

    @property
    def finished(self) -> bool:
        return self.navigator.state.quit

    def dispatch(self, event: Event) -> Optional[str]:
        """Process ``event`` and return the new frame, or None after quitting."""
        if self.finished:
            return None

        if isinstance(event, KeyEvent):
            dirty = self._handle_key(event.key)
        elif isinstance(event, ResizeEvent):
            dirty = self._handle_resize(event)
        else:
            raise TypeError(f"Unsupported event: {event!r}")

        if self.finished:
            logger.info("Quit requested; ending session")
            return None
        if dirty:
            self._rerender()
        return self.view()

    def view(self) -> str:
        return compose_frame(self.navigator, self.viewport, self.style, self.height)

    def _handle_key(self, key: str) -> bool:
        action = action_for_key(key)
        if action is None:
            logger.debug("Ignoring unbound key %r", key)
            return False
        if action in SCROLL_ACTIONS:
            self._scroll(action)
            return False
        return self.navigator.apply(action) and self.state.ready

    def _handle_resize(self, event: ResizeEvent) -> bool:
        width_changed = event.width != self.viewport.width
        self.height = max(event.height, 0)
        _, body_height, _ = block_heights(self.height)
        self.viewport.resize(event.width, body_height)
        if self.navigator.resize():
            return True
        if width_changed:
            # Content is wrapped to the viewport width, so it must be redone.
            self._rerender(keep_offset=True)
        return False

    def _scroll(self, action: Action) -> None:
        viewport = self.viewport
        if action is Action.SCROLL_UP:
            viewport.line_up()
        elif action is Action.SCROLL_DOWN:
            viewport.line_down()
        elif action is Action.PAGE_UP:
            viewport.page_up()
        elif action is Action.PAGE_DOWN:
            viewport.page_down()
        elif action is Action.HALF_PAGE_UP:
            viewport.half_page_up()
        elif action is Action.HALF_PAGE_DOWN:
            viewport.half_page_down()
        elif action is Action.TOP:
            viewport.goto_top()
        elif action is Action.BOTTOM:
            viewport.goto_bottom()

    def _rerender(self, keep_offset: bool = False) -> None:
        offset = self.viewport.y_offset
        content = render_selection(
            self.navigator.current_feed,
            self.state.item_index,
            self.viewport.width,
            self.on_error,
        )
        self.viewport.set_content(content)
        if keep_offset:
            self.viewport.scroll_by(offset)
