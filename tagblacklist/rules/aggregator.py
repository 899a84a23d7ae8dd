#!/usr/bin/env python3
"""Batch evaluation of content items against a rule set.

A pass fetches every item concurrently, then evaluates each item against
every enabled rule. It records:
- the ids hit by any rule (a set)
- the ids hit by each rule (each rule's ``hits``, in item order)
- the number of items evaluated

Fetching is fail-fast: if any lookup fails, the remaining lookups are
cancelled, the pass raises ItemFetchError and the rules keep the hits of
the previous pass.

Example:
    >>> aggregator = BatchAggregator()
    >>> result = await aggregator.evaluate_batch([1, 2, 3], rule_set, provider.fetch_item)
    >>> result.total_hit_ids
    {2}
"""

import asyncio
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from tagblacklist.core.constants import ErrorCode, ItemId, TagBlacklistError
from tagblacklist.core.logging import Logger, get_logger
from tagblacklist.items import ContentItem, ItemFetcher
from tagblacklist.rules.engine import RuleEvaluator, RuleSet


class ItemFetchError(TagBlacklistError):
    """A content item lookup failed during a pass."""

    def __init__(self, item_id: ItemId, cause: BaseException):
        self.item_id = item_id
        self.cause = cause
        super().__init__(
            f"Failed to fetch item {item_id!r}: {cause}", ErrorCode.DEPENDENCY_ERROR
        )


@dataclass
class EvaluationResult:
    """Outcome of one pass."""

    total_hit_ids: Set[ItemId] = field(default_factory=set)
    total_item_count: int = 0
    per_rule_hits: RuleSet = field(default_factory=RuleSet)

    @property
    def hit_count(self) -> int:
        return len(self.total_hit_ids)

    def is_hit(self, item_id: ItemId) -> bool:
        return item_id in self.total_hit_ids


class BatchAggregator:
    """Runs passes of a rule set over batches of item ids."""

    def __init__(self, evaluator: Optional[RuleEvaluator] = None, logger: Optional[Logger] = None):
        """Initialize aggregator.

        Args:
            evaluator: Rule evaluator (default RuleEvaluator)
            logger: Logger (global logger if omitted)
        """
        self.evaluator = evaluator or RuleEvaluator()
        self.logger = logger or get_logger()

    async def evaluate_batch(
        self,
        item_ids: Iterable[ItemId],
        rule_set: RuleSet,
        fetch_item: ItemFetcher,
    ) -> EvaluationResult:
        """Evaluate a batch of items against rule_set.

        Args:
            item_ids: Ids of the items to evaluate
            rule_set: Rules to apply; their hits are replaced
            fetch_item: Async lookup from id to content item

        Returns:
            Result of the pass

        Raises:
            ItemFetchError: If any item lookup fails
        """
        items = await self.fetch_all(list(item_ids), fetch_item)
        return self.evaluate_items(items, rule_set)

    async def fetch_all(self, item_ids: List[ItemId], fetch_item: ItemFetcher) -> List[ContentItem]:
        """Fetch all items concurrently, preserving id order.

        Raises:
            ItemFetchError: On the first failed lookup
        """
        tasks = [asyncio.ensure_future(self._fetch_one(item_id, fetch_item)) for item_id in item_ids]
        if not tasks:
            return []

        try:
            return list(await asyncio.gather(*tasks))
        except ItemFetchError as e:
            for task in tasks:
                task.cancel()
            self.logger.error("Item fetch failed, pass aborted", item_id=e.item_id, items=len(tasks))
            raise

    async def _fetch_one(self, item_id: ItemId, fetch_item: ItemFetcher) -> ContentItem:
        try:
            return await fetch_item(item_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise ItemFetchError(item_id, e) from e

    def evaluate_items(self, items: Iterable[ContentItem], rule_set: RuleSet) -> EvaluationResult:
        """Evaluate already fetched items, resetting rule hits first.

        An item hit by several rules is listed in each rule's hits but
        counted once in ``total_hit_ids``.
        """
        rule_set.reset_hits()
        result = EvaluationResult(per_rule_hits=rule_set)
        rules = rule_set.enabled_rules()

        for item in items:
            result.total_item_count += 1
            for rule in rules:
                if self.evaluator.evaluate(item, rule):
                    rule.hits.append(item.id)
                    result.total_hit_ids.add(item.id)

        self.logger.debug(
            "Evaluated batch",
            blacklist=rule_set.name,
            hits=result.hit_count,
            total=result.total_item_count,
        )
        return result
