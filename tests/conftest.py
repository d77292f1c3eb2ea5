from datetime import datetime, timezone

import pytest

from feed_pager.models import Feed, Item, StyleConfig


def make_item(index: int, **overrides) -> Item:
    fields = dict(
        title=f"Article {index}",
        description=f"<p>Summary for article {index} &amp; friends.</p>",
        content=f"<p>Body of article {index}.</p>",
        authors=("Ada Lovelace", "Alan Turing"),
        published=datetime(2024, 1, index + 1, 12, 0, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Item(**fields)


@pytest.fixture
def style():
    return StyleConfig()


@pytest.fixture
def three_item_feed():
    return Feed(title="Example", items=tuple(make_item(i) for i in range(3)))


@pytest.fixture
def long_item():
    paragraphs = "".join(f"<p>Paragraph number {i}.</p>" for i in range(60))
    return make_item(0, title="Long read", description=paragraphs, content="")
