class FeedPagerError(Exception):
    """Base class for errors raised by feed_pager."""


class FeedFetchError(FeedPagerError):
    """Raised when a feed cannot be fetched or parsed."""


class ContentError(FeedPagerError):
    """Raised when an item cannot be turned into displayable text."""


class ConversionError(ContentError):
    """Raised when HTML cannot be converted to markdown."""


class RenderError(ContentError):
    """Raised when markdown cannot be rendered to styled text."""
