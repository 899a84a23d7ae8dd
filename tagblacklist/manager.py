#!/usr/bin/env python3
"""Blacklist selection and application.

BlacklistManager ties the pieces together:
- the selected blacklist and its parsed RuleSet
- passes over batches of item ids
- the last applied EvaluationResult, used for hide/show decisions

Each selection bumps a generation counter. A pass remembers the generation
it started under, and its result is dropped if the selection changed
before it finished.

Example:
    >>> manager = BlacklistManager(store, provider.fetch_item)
    >>> manager.select("Safe mode")
    >>> result = await manager.apply([1, 2, 3])
    >>> manager.title()
    'Blacklist 1/3'
"""

from typing import Dict, Iterable, Optional

from tagblacklist.core.constants import ItemId
from tagblacklist.core.logging import Logger, get_logger
from tagblacklist.items import ItemFetcher
from tagblacklist.rules.aggregator import BatchAggregator, EvaluationResult, ItemFetchError
from tagblacklist.rules.engine import Rule, RuleSet
from tagblacklist.rules.parser import RuleParser
from tagblacklist.store import BlacklistItem, BlacklistStore


class BlacklistManager:
    """Owns the selected blacklist and the results of its passes."""

    def __init__(
        self,
        store: BlacklistStore,
        fetch_item: ItemFetcher,
        logger: Optional[Logger] = None,
        aggregator: Optional[BatchAggregator] = None,
    ):
        """Initialize manager.

        Args:
            store: Named blacklist storage
            fetch_item: Async content item lookup
            logger: Logger (global logger if omitted)
            aggregator: Batch aggregator (default BatchAggregator)
        """
        self.store = store
        self.fetch_item = fetch_item
        self.logger = logger or get_logger()
        self.parser = RuleParser(self.logger)
        self.aggregator = aggregator or BatchAggregator(logger=self.logger)

        self.selected: Optional[BlacklistItem] = None
        self.rule_set: RuleSet = RuleSet()
        self.last_result: Optional[EvaluationResult] = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def selected_name(self) -> Optional[str]:
        return self.selected.name if self.selected else None

    def blacklist_names(self):
        return self.store.names()

    def select(self, name: str) -> RuleSet:
        """Select a blacklist and parse its rules.

        Clears the last result; callers re-apply afterwards.

        Raises:
            BlacklistNotFoundError: If the store has no such blacklist
        """
        item = self.store.get(name)
        self._activate(item)
        self.logger.info("Selected blacklist", blacklist=name, rules=len(self.rule_set))
        return self.rule_set

    def select_default(self, preferred: Optional[str] = None) -> Optional[RuleSet]:
        """Select preferred if stored, else the first stored blacklist.

        Returns:
            The new RuleSet, or None if the store is empty
        """
        names = self.store.names()
        if preferred and preferred in names:
            return self.select(preferred)
        if names:
            return self.select(names[0])
        self.clear_selection()
        return None

    def clear_selection(self) -> None:
        self._activate(None)

    def _activate(self, item: Optional[BlacklistItem]) -> None:
        self._generation += 1
        self.selected = item
        if item is None:
            self.rule_set = RuleSet()
        else:
            self.rule_set = self.parser.parse(item.value, name=item.name)
        self.last_result = None

    async def apply(self, item_ids: Iterable[ItemId]) -> Optional[EvaluationResult]:
        """Run a pass of the selected blacklist over item_ids.

        Returns:
            The new result, or None if the selection changed while the pass
            was running (the stale result, or failure, is dropped)

        Raises:
            ItemFetchError: If an item lookup of a current pass failed; the
                last result is kept
        """
        generation = self._generation
        rule_set = self.rule_set
        ids = list(item_ids)

        with self.logger.add_context(blacklist=self.selected_name, generation=generation):
            try:
                result = await self.aggregator.evaluate_batch(ids, rule_set, self.fetch_item)
            except ItemFetchError as e:
                if generation != self._generation:
                    self.logger.warning(
                        "Discarding failed stale pass", item_id=e.item_id, current=self._generation
                    )
                    return None
                self.logger.error("Pass failed, keeping previous result", item_id=e.item_id)
                raise

            if generation != self._generation:
                self.logger.warning("Discarding stale pass", current=self._generation)
                return None

            self.last_result = result
            self.logger.info(
                "Applied blacklist", hits=result.hit_count, total=result.total_item_count
            )
            return result

    def set_rule_disabled(self, index: int, disabled: bool) -> Rule:
        """Enable or disable a rule of the selected blacklist.

        Takes effect on the next pass.
        """
        return self.rule_set.set_disabled(index, disabled)

    def toggle_rule(self, index: int) -> Rule:
        return self.rule_set.toggle(index)

    def update_blacklist(self, name: str, text: str) -> None:
        """Store blacklist text, re-parsing it if it is the selected one."""
        self.store.add_or_update(BlacklistItem(name, text))
        if self.selected_name == name:
            self.select(name)

    def remove_blacklist(self, name: str) -> None:
        """Remove a blacklist, falling back to the first remaining one if it was selected.

        Raises:
            BlacklistNotFoundError: If the store has no such blacklist
        """
        self.store.remove(name)
        if self.selected_name == name:
            self.select_default()

    def is_hidden(self, item_id: ItemId) -> bool:
        return self.last_result is not None and self.last_result.is_hit(item_id)

    def hidden_states(self, item_ids: Iterable[ItemId]) -> Dict[ItemId, bool]:
        """Map each id to whether the last result hides it."""
        return {item_id: self.is_hidden(item_id) for item_id in item_ids}

    def title(self) -> str:
        """Sidebar title, e.g. ``Blacklist 3/40``."""
        if self.last_result is None:
            return "Blacklist 0/0"
        return f"Blacklist {self.last_result.hit_count}/{self.last_result.total_item_count}"
