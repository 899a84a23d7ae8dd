"""tagblacklist - filter tagged content with wildcard blacklists.

Blacklist text is parsed into rules, rules are matched against the tags of
content items, and the items hit by any rule are reported per rule and in
total.
"""

from tagblacklist.core.constants import TAGBLACKLIST_VERSION as __version__
from tagblacklist.items import CachedItemProvider, ContentItem, StaticItemProvider
from tagblacklist.manager import BlacklistManager
from tagblacklist.rules import (
    BatchAggregator,
    EvaluationResult,
    ItemFetchError,
    Rule,
    RuleEvaluator,
    RuleParser,
    RuleSet,
    parse,
    wildcard_match,
)
from tagblacklist.store import BlacklistItem, MemoryBlacklistStore, YamlBlacklistStore

__all__ = [
    "__version__",
    "BatchAggregator",
    "BlacklistItem",
    "BlacklistManager",
    "CachedItemProvider",
    "ContentItem",
    "EvaluationResult",
    "ItemFetchError",
    "MemoryBlacklistStore",
    "Rule",
    "RuleEvaluator",
    "RuleParser",
    "RuleSet",
    "StaticItemProvider",
    "YamlBlacklistStore",
    "parse",
    "wildcard_match",
]
