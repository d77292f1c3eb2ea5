from datetime import datetime, timezone

import pytest

from feed_pager.models import EPOCH, Feed, Item, StyleConfig


def test_last_updated_defaults_to_epoch_without_timestamps():
    item = Item(title="Untimed")

    assert item.last_updated() == EPOCH
    assert EPOCH.timestamp() == 0


def test_last_updated_prefers_updated_over_published():
    published = datetime(2024, 1, 1, tzinfo=timezone.utc)
    updated = datetime(2024, 2, 1, tzinfo=timezone.utc)

    item = Item(title="Both", published=published, updated=updated)

    assert item.last_updated() == updated


def test_last_updated_falls_back_to_published():
    published = datetime(2024, 1, 1, tzinfo=timezone.utc)

    assert Item(title="Published", published=published).last_updated() == published


def test_feed_length_counts_items():
    assert len(Feed(title="Empty")) == 0
    assert len(Feed(title="One", items=(Item(title="a"),))) == 1


def test_style_config_rejects_negative_padding():
    with pytest.raises(ValueError):
        StyleConfig(horizontal_padding=-1)
    with pytest.raises(ValueError):
        StyleConfig(vertical_padding=-2)
