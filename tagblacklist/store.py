#!/usr/bin/env python3
"""Named blacklist storage.

A blacklist is a name and its raw rule text. Stores keep them in insertion
order and seed an empty store with the default blacklists.

Example:
    >>> store = YamlBlacklistStore("~/.config/tagblacklist/blacklists.yaml")
    >>> store.add_or_update(BlacklistItem("Work", "rating:e*\\nartist:someone"))
    >>> store.names()
    ['Safe mode', 'No blacklist', 'Work']
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Union

import yaml

from tagblacklist.core.constants import DEFAULT_BLACKLISTS, ErrorCode, TagBlacklistError


class StoreError(TagBlacklistError):
    """Blacklist storage failed."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        super().__init__(message, error_code)


class BlacklistNotFoundError(StoreError):
    """No blacklist with the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Blacklist not found: {name}", ErrorCode.NOT_FOUND)


@dataclass
class BlacklistItem:
    """A named blacklist text."""

    name: str
    value: str = ""


class BlacklistStore(ABC):
    """Base class for blacklist storage backends.

    Subclasses load and save the whole list; lookups work on the in-memory
    copy.
    """

    def __init__(self, seed_defaults: bool = True):
        self._lock = threading.RLock()
        self._items: Dict[str, BlacklistItem] = {
            item.name: item for item in self._load()
        }
        if seed_defaults and not self._items:
            for name, value in DEFAULT_BLACKLISTS.items():
                self._items[name] = BlacklistItem(name, value)
            self._save(list(self._items.values()))

    @abstractmethod
    def _load(self) -> List[BlacklistItem]:
        """Load the stored blacklists."""

    @abstractmethod
    def _save(self, items: List[BlacklistItem]) -> None:
        """Persist the complete list of blacklists."""

    def names(self) -> List[str]:
        with self._lock:
            return list(self._items)

    def items(self) -> List[BlacklistItem]:
        with self._lock:
            return list(self._items.values())

    def get(self, name: str) -> BlacklistItem:
        """Get blacklist by name.

        Raises:
            BlacklistNotFoundError: If there is no such blacklist
        """
        with self._lock:
            try:
                return self._items[name]
            except KeyError:
                raise BlacklistNotFoundError(name) from None

    def add_or_update(self, item: BlacklistItem) -> None:
        """Add a blacklist, or replace the text of the one with the same name."""
        with self._lock:
            self._items[item.name] = item
            self._save(list(self._items.values()))

    def remove(self, name: str) -> BlacklistItem:
        """Remove blacklist by name.

        Raises:
            BlacklistNotFoundError: If there is no such blacklist
        """
        with self._lock:
            if name not in self._items:
                raise BlacklistNotFoundError(name)
            item = self._items.pop(name)
            self._save(list(self._items.values()))
            return item

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[BlacklistItem]:
        return iter(self.items())


class MemoryBlacklistStore(BlacklistStore):
    """Store that lives for the lifetime of the process."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None, seed_defaults: bool = True):
        self._initial = dict(initial or {})
        super().__init__(seed_defaults=seed_defaults)

    def _load(self) -> List[BlacklistItem]:
        return [BlacklistItem(name, value) for name, value in self._initial.items()]

    def _save(self, items: List[BlacklistItem]) -> None:
        pass


class YamlBlacklistStore(BlacklistStore):
    """Store persisted as a YAML list of ``{name, value}`` mappings."""

    def __init__(self, path: Union[str, Path], seed_defaults: bool = True):
        """Initialize store.

        Args:
            path: YAML file; created (with parents) on first save
            seed_defaults: Write the default blacklists into an empty store
        """
        self.path = Path(path).expanduser()
        super().__init__(seed_defaults=seed_defaults)

    def _load(self) -> List[BlacklistItem]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise StoreError(f"YAML parse error in {self.path}: {e}", ErrorCode.INVALID_INPUT) from e
        except OSError as e:
            raise StoreError(f"Cannot read blacklist store {self.path}: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError(
                f"Blacklist store must hold a list: {self.path}", ErrorCode.INVALID_INPUT
            )

        items = []
        for entry in data:
            if not isinstance(entry, dict) or "name" not in entry:
                raise StoreError(
                    f"Invalid blacklist entry in {self.path}: {entry!r}", ErrorCode.INVALID_INPUT
                )
            items.append(BlacklistItem(str(entry["name"]), str(entry.get("value") or "")))
        return items

    def _save(self, items: List[BlacklistItem]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    [asdict(item) for item in items],
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
        except OSError as e:
            raise StoreError(f"Cannot write blacklist store {self.path}: {e}") from e
