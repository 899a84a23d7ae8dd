"""Shared pytest fixtures for tagblacklist tests."""
import logging
from pathlib import Path
from typing import Any, Dict, List

import pytest
import yaml

from tagblacklist.core.logging import Logger, set_global_logger
from tagblacklist.items import ContentItem, StaticItemProvider
from tagblacklist.store import MemoryBlacklistStore


def _make_item(item_id, general=(), rating="safe", **categories) -> ContentItem:
    """Build a content item with general tags and optional extra categories."""
    tags = {"general": list(general)}
    for category, values in categories.items():
        tags[category] = list(values)
    return ContentItem(id=item_id, rating=rating, tags=tags)


@pytest.fixture(autouse=True)
def quiet_logger():
    """Install a handler-less global logger so tests don't write to stderr."""
    logger = Logger("tagblacklist", handlers=[logging.NullHandler()])
    set_global_logger(logger)
    yield logger
    set_global_logger(None)


@pytest.fixture
def make_item():
    """Factory for content items: make_item(id, general=[...], rating=..., artist=[...])."""
    return _make_item


@pytest.fixture
def sample_items() -> List[ContentItem]:
    """Four posts covering ratings, categories and conjunctions."""
    return [
        _make_item(1, general=["1girl", "solo", "red_hair"], rating="safe", artist=["someone"]),
        _make_item(2, general=["2girls", "blue_eyes"], rating="explicit"),
        _make_item(3, general=["red_hair"], rating="questionable", character=["blue_eyes"]),
        _make_item(4, general=["landscape", "no_humans"], rating="general"),
    ]


@pytest.fixture
def provider(sample_items) -> StaticItemProvider:
    return StaticItemProvider(sample_items)


@pytest.fixture
def store() -> MemoryBlacklistStore:
    return MemoryBlacklistStore(
        {
            "Safe mode": "rating:q*\nrating:e*",
            "Hair": "red_hair AND blue_eyes",
            "Solo": "# solo posts\nsolo\n1girl // trailing",
        }
    )


@pytest.fixture
def items_data() -> List[Dict[str, Any]]:
    return [
        {"id": 10, "rating": "safe", "tags": {"general": ["1girl", "solo"], "artist": ["someone"]}},
        {"id": 11, "rating": "explicit", "tags": "2girls blue_eyes"},
        {"id": 12, "rating": "safe", "tags": ["landscape"]},
    ]


@pytest.fixture
def items_file(tmp_path: Path, items_data) -> Path:
    path = tmp_path / "items.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(items_data, f)
    return path
