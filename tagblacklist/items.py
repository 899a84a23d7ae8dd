#!/usr/bin/env python3
"""Content items and item providers.

This module provides:
- ContentItem: an item id with categorized tags and a rating
- StaticItemProvider: async lookup over an in-memory or YAML-loaded mapping
- CachedItemProvider: memoizing wrapper that shares in-flight fetches

Providers expose ``async fetch_item(item_id) -> ContentItem`` and must be
safe to call concurrently for many ids.

Example:
    >>> provider = CachedItemProvider(StaticItemProvider.from_file("posts.yaml").fetch_item)
    >>> item = await provider.fetch_item(1234)
    >>> item.tag_pool()
    ['someone', '1girl', 'solo', 'rating:safe']
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

import yaml

from tagblacklist.core.cache import CacheConfig, LRUCache
from tagblacklist.core.constants import (
    RATING_PREFIX,
    TAG_CATEGORIES,
    ErrorCode,
    ItemId,
    TagBlacklistError,
)

ItemFetcher = Callable[[ItemId], Awaitable["ContentItem"]]


class ItemNotFoundError(TagBlacklistError):
    """Raised by a provider that has no item for an id."""

    def __init__(self, item_id: ItemId):
        self.item_id = item_id
        super().__init__(f"No content item with id {item_id!r}", ErrorCode.NOT_FOUND)


def normalize_item_id(item_id: Any) -> ItemId:
    """Convert numeric id strings to int, leave other ids untouched."""
    if isinstance(item_id, str) and item_id.strip().isdecimal():
        return int(item_id)
    return item_id


@dataclass
class ContentItem:
    """A tagged content item (post)."""

    id: ItemId
    rating: str = ""
    tags: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], item_id: Optional[ItemId] = None) -> "ContentItem":
        """Build an item from a mapping.

        ``tags`` may be a category mapping, a list of tags or a
        space-separated string. Uncategorized tags are filed under
        ``general``.

        Args:
            data: Item mapping with ``id``, ``rating`` and ``tags``
            item_id: Id to use when the mapping has none

        Returns:
            New content item
        """
        raw_tags = data.get("tags") or {}
        if isinstance(raw_tags, str):
            tags = {"general": raw_tags.split()}
        elif isinstance(raw_tags, Mapping):
            tags = {}
            for category, values in raw_tags.items():
                if isinstance(values, str):
                    values = values.split()
                tags[str(category)] = [str(v) for v in values or []]
        else:
            tags = {"general": [str(v) for v in raw_tags]}

        resolved_id = data.get("id", item_id)
        if resolved_id is None:
            raise TagBlacklistError("Content item has no id", ErrorCode.INVALID_INPUT)

        return cls(
            id=normalize_item_id(resolved_id),
            rating=str(data.get("rating") or ""),
            tags=tags,
        )

    def tag_pool(self) -> List[str]:
        """Flatten every tag category and append ``rating:<value>``.

        Known categories come first in their canonical order, the remaining
        ones follow in insertion order.
        """
        ordered = [c for c in TAG_CATEGORIES if c in self.tags]
        ordered += [c for c in self.tags if c not in TAG_CATEGORIES]

        pool: List[str] = []
        for category in ordered:
            pool.extend(self.tags[category])
        pool.append(f"{RATING_PREFIX}{self.rating}")
        return pool


class StaticItemProvider:
    """Item provider backed by an in-memory mapping."""

    def __init__(self, items: Optional[Iterable[ContentItem]] = None):
        self._items: Dict[ItemId, ContentItem] = {}
        for item in items or []:
            self.add(item)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StaticItemProvider":
        """Load items from a YAML (or JSON) file.

        The file holds either a list of item mappings or a mapping of
        id -> item mapping.

        Raises:
            TagBlacklistError: If the file cannot be read or has the wrong shape
        """
        file_path = Path(path).expanduser()
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise TagBlacklistError(
                f"Cannot read items file {path}: {e}", ErrorCode.NOT_FOUND
            ) from e
        except yaml.YAMLError as e:
            raise TagBlacklistError(
                f"Cannot parse items file {path}: {e}", ErrorCode.INVALID_INPUT
            ) from e

        if data is None:
            return cls()
        if isinstance(data, Mapping):
            items = [ContentItem.from_dict(v or {}, item_id=k) for k, v in data.items()]
        elif isinstance(data, list):
            items = [ContentItem.from_dict(v) for v in data]
        else:
            raise TagBlacklistError(
                f"Items file must hold a list or a mapping: {path}", ErrorCode.INVALID_INPUT
            )
        return cls(items)

    def add(self, item: ContentItem) -> None:
        self._items[item.id] = item

    def ids(self) -> List[ItemId]:
        return list(self._items)

    async def fetch_item(self, item_id: ItemId) -> ContentItem:
        """Look up an item.

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        item = self._items.get(normalize_item_id(item_id))
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def __len__(self) -> int:
        return len(self._items)


class CachedItemProvider:
    """Memoizing wrapper around an async item fetcher.

    Concurrent requests for the same id share a single fetch. Successful
    results are cached; failures are not, so the next request retries.
    """

    def __init__(self, fetcher: ItemFetcher, cache_config: Optional[CacheConfig] = None):
        """Initialize provider.

        Args:
            fetcher: Underlying async fetch function
            cache_config: Cache limits and TTL
        """
        self._fetcher = fetcher
        self._cache = LRUCache(cache_config)
        self._in_flight: Dict[ItemId, "asyncio.Future[ContentItem]"] = {}

    async def fetch_item(self, item_id: ItemId) -> ContentItem:
        item_id = normalize_item_id(item_id)

        cached = self._cache.get(item_id)
        if cached is not None:
            return cached

        future = self._in_flight.get(item_id)
        if future is None:
            future = asyncio.ensure_future(self._fetch_and_store(item_id))
            self._in_flight[item_id] = future
            future.add_done_callback(lambda done: self._forget(item_id, done))

        # shield: one cancelled waiter must not cancel the shared fetch
        return await asyncio.shield(future)

    def _forget(self, item_id: ItemId, future: "asyncio.Future[ContentItem]") -> None:
        if self._in_flight.get(item_id) is future:
            del self._in_flight[item_id]

    async def _fetch_and_store(self, item_id: ItemId) -> ContentItem:
        item = await self._fetcher(item_id)
        self._cache.set(item_id, item)
        return item

    def invalidate(self, item_id: ItemId) -> bool:
        return self._cache.invalidate(normalize_item_id(item_id))

    def clear(self) -> None:
        self._cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        stats = self._cache.get_stats()
        stats["in_flight"] = len(self._in_flight)
        return stats
