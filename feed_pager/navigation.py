"""Key bindings, input events and the feed/item selection state."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from .models import Feed, FeedCollection, Item

logger = logging.getLogger(__name__)


class Action(Enum):
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HALF_PAGE_UP = "half_page_up"
    HALF_PAGE_DOWN = "half_page_down"
    TOP = "top"
    BOTTOM = "bottom"
    PREVIOUS_FEED = "previous_feed"
    NEXT_FEED = "next_feed"
    TOGGLE_HELP = "toggle_help"
    QUIT = "quit"


SCROLL_ACTIONS = frozenset(
    {
        Action.SCROLL_UP,
        Action.SCROLL_DOWN,
        Action.PAGE_UP,
        Action.PAGE_DOWN,
        Action.HALF_PAGE_UP,
        Action.HALF_PAGE_DOWN,
        Action.TOP,
        Action.BOTTOM,
    }
)


@dataclass(frozen=True)
class Binding:
    """Keys that trigger an action, plus how the help screen lists them."""

    action: Action
    keys: Tuple[str, ...]
    help_key: str
    help_text: str


KEY_BINDINGS: Tuple[Binding, ...] = (
    Binding(Action.SCROLL_UP, ("k", "up", "wheelup"), "k/up", "move up"),
    Binding(Action.SCROLL_DOWN, ("j", "down", "wheeldown"), "j/down", "move down"),
    Binding(Action.MOVE_LEFT, ("h", "left"), "h/left", "previous article"),
    Binding(Action.MOVE_RIGHT, ("l", "right"), "l/right", "next article"),
    Binding(Action.PAGE_UP, ("pgup", "b"), "b/pgup", "page up"),
    Binding(Action.PAGE_DOWN, ("pgdown", "space", "f"), "f/pgdn", "page down"),
    Binding(Action.HALF_PAGE_UP, ("u", "ctrl+u"), "u", "half page up"),
    Binding(Action.HALF_PAGE_DOWN, ("d", "ctrl+d"), "d", "half page down"),
    Binding(Action.TOP, ("g", "home"), "g/home", "go to top"),
    Binding(Action.BOTTOM, ("G", "end"), "G/end", "go to bottom"),
    Binding(Action.PREVIOUS_FEED, ("[",), "[", "previous feed"),
    Binding(Action.NEXT_FEED, ("]",), "]", "next feed"),
    Binding(Action.TOGGLE_HELP, ("?",), "?", "toggle help"),
    Binding(Action.QUIT, ("q", "esc", "ctrl+c"), "q/esc/<C-c>", "quit"),
)

_ACTIONS_BY_KEY: Dict[str, Action] = {
    key: binding.action for binding in KEY_BINDINGS for key in binding.keys
}


def action_for_key(key: str) -> Optional[Action]:
    """Return the action bound to ``key``, if any."""
    return _ACTIONS_BY_KEY.get(key)


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = Union[KeyEvent, ResizeEvent]


@dataclass
class NavigationState:
    feed_index: int = 0
    item_index: int = 0
    help_visible: bool = False
    ready: bool = False
    quit: bool = False


class Navigator:
    """Owns the selection over a feed collection.

    Moves past either end of a feed are ignored rather than reported, so
    ``item_index`` always addresses a valid item (or stays at 0 for an
    empty feed).
    """

    def __init__(self, feeds: FeedCollection) -> None:
        self.feeds = feeds
        self.state = NavigationState()

    @property
    def current_feed(self) -> Optional[Feed]:
        if not self.feeds:
            return None
        return self.feeds[self.state.feed_index]

    @property
    def item_count(self) -> int:
        feed = self.current_feed
        return len(feed) if feed is not None else 0

    @property
    def current_item(self) -> Optional[Item]:
        feed = self.current_feed
        if feed is None or not 0 <= self.state.item_index < len(feed):
            return None
        return feed.items[self.state.item_index]

    def apply(self, action: Action) -> bool:
        """Apply a selection action and return whether content must re-render."""
        state = self.state
        if action is Action.QUIT:
            state.quit = True
            return False
        if action is Action.TOGGLE_HELP:
            state.help_visible = not state.help_visible
            return False
        if action is Action.MOVE_LEFT:
            if state.item_index > 0:
                state.item_index -= 1
            return True
        if action is Action.MOVE_RIGHT:
            if state.item_index < self.item_count - 1:
                state.item_index += 1
            return True
        if action is Action.PREVIOUS_FEED:
            return self._select_feed(state.feed_index - 1)
        if action is Action.NEXT_FEED:
            return self._select_feed(state.feed_index + 1)
        return False

    def resize(self) -> bool:
        """Record a size event; the first one makes the session ready."""
        if self.state.ready:
            return False
        self.state.ready = True
        logger.debug("Received first window size; session is ready")
        return True

    def _select_feed(self, index: int) -> bool:
        if not 0 <= index < len(self.feeds) or index == self.state.feed_index:
            return False
        self.state.feed_index = index
        self.state.item_index = 0
        logger.debug("Switched to feed %d (%s)", index, self.feeds[index].title)
        return True
