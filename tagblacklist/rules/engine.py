#!/usr/bin/env python3
"""Blacklist rules and their evaluation against content items.

This module provides:
- Rule: one parsed blacklist line with its per-pass hit list
- RuleSet: the ordered rules of one blacklist text
- RuleEvaluator: decides whether an item is hit by a rule

A rule is matched against the item's flattened tag pool (every tag
category plus a synthesized ``rating:<value>`` tag). Conjunctive rules
(``red_hair AND blue_eyes``) require every sub-pattern to match at least
one tag of the pool.

Example:
    >>> rule = Rule(pattern="red_hair AND blue_eyes", is_conjunctive=True)
    >>> RuleEvaluator().evaluate(item, rule)
    True
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from tagblacklist.core.constants import CONJUNCTION_SEPARATORS, ItemId
from tagblacklist.items import ContentItem
from tagblacklist.rules.patterns import matches_any

# Parsed patterns are lower-cased, so hand-built rules are split without case;
# the parser splits the original text with the exact separators instead
_CONJUNCTION_RE = re.compile(
    "|".join(re.escape(sep) for sep in CONJUNCTION_SEPARATORS), re.IGNORECASE
)
_EXACT_CONJUNCTION_RE = re.compile("|".join(re.escape(sep) for sep in CONJUNCTION_SEPARATORS))


def split_conjunction(pattern: str, ignore_case: bool = True) -> List[str]:
    """Split a conjunctive pattern into its sub-patterns.

    Args:
        pattern: Pattern containing `` AND `` or `` && `` separators
        ignore_case: Also split on lower-case `` and ``
    """
    regex = _CONJUNCTION_RE if ignore_case else _EXACT_CONJUNCTION_RE
    return [part.strip() for part in regex.split(pattern)]


@dataclass
class Rule:
    """A single blacklist entry.

    Rules keep their position in the blacklist text. ``hits`` holds the ids
    matched during the most recent pass and is reset by every pass.
    ``conjuncts`` holds the sub-patterns the parser split off, if any.
    """

    pattern: str
    is_conjunctive: bool = False
    hits: List[ItemId] = field(default_factory=list)
    is_disabled: bool = False
    conjuncts: List[str] = field(default_factory=list)

    @property
    def sub_patterns(self) -> List[str]:
        """Sub-patterns of a conjunctive rule (the whole pattern otherwise)."""
        if not self.is_conjunctive:
            return [self.pattern]
        if self.conjuncts:
            return list(self.conjuncts)
        return split_conjunction(self.pattern)

    @property
    def hit_count(self) -> int:
        return len(self.hits)


class RuleSet:
    """Ordered rules produced by one parse of one blacklist text.

    Only ``hits`` and ``is_disabled`` change after construction; editing the
    text produces a new RuleSet.
    """

    def __init__(self, rules: Optional[Sequence[Rule]] = None, name: Optional[str] = None):
        """Initialize rule set.

        Args:
            rules: Rules in source order
            name: Name of the blacklist the rules came from
        """
        self._rules: List[Rule] = list(rules or [])
        self.name = name

    @property
    def rules(self) -> List[Rule]:
        return self._rules.copy()

    def enabled_rules(self) -> List[Rule]:
        return [rule for rule in self._rules if not rule.is_disabled]

    def patterns(self) -> List[str]:
        return [rule.pattern for rule in self._rules]

    def reset_hits(self) -> None:
        """Clear the hit list of every rule."""
        for rule in self._rules:
            rule.hits = []

    def set_disabled(self, index: int, disabled: bool) -> Rule:
        """Enable or disable the rule at index.

        Raises:
            IndexError: If there is no rule at index
        """
        rule = self._rules[index]
        rule.is_disabled = disabled
        return rule

    def toggle(self, index: int) -> Rule:
        return self.set_disabled(index, not self._rules[index].is_disabled)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index: int) -> Rule:
        return self._rules[index]

    def __repr__(self) -> str:
        return f"RuleSet(name={self.name!r}, rules={self.patterns()!r})"


class RuleEvaluator:
    """Evaluates content items against blacklist rules.

    Evaluation is pure: recording hits on a rule is left to the caller.
    """

    def evaluate(self, item: ContentItem, rule: Rule) -> bool:
        """Check whether item is hit by rule.

        The whole pattern is always tried against the pool, even for
        conjunctive rules that already failed the split check. A pattern that
        is valid both ways can therefore hit through either path.

        Args:
            item: Content item to check
            rule: Rule to apply

        Returns:
            True if the item is hit
        """
        if rule.is_disabled:
            return False

        pool = item.tag_pool()

        if rule.is_conjunctive:
            sub_patterns = rule.sub_patterns
            if all(matches_any(sub, pool) for sub in sub_patterns):
                return True

        return matches_any(rule.pattern, pool)

    def matching_rules(self, item: ContentItem, rule_set: RuleSet) -> List[Rule]:
        """Get every enabled rule of rule_set that hits item, in rule order."""
        return [rule for rule in rule_set.enabled_rules() if self.evaluate(item, rule)]
