"""tagblacklist Rules System.

This module provides blacklist parsing and matching:
- RuleParser: blacklist text to RuleSet
- wildcard_match: ``*`` wildcard matching of a pattern against a tag
- RuleEvaluator: one content item against one rule
- BatchAggregator: a batch of item ids against a RuleSet
"""

from .aggregator import BatchAggregator, EvaluationResult, ItemFetchError
from .engine import Rule, RuleEvaluator, RuleSet, split_conjunction
from .parser import RuleParser, parse
from .patterns import compile_wildcard, matches_any, wildcard_match

__all__ = [
    # Pattern matching
    "compile_wildcard",
    "matches_any",
    "wildcard_match",
    # Rules
    "Rule",
    "RuleSet",
    "RuleEvaluator",
    "split_conjunction",
    # Parsing
    "RuleParser",
    "parse",
    # Batch evaluation
    "BatchAggregator",
    "EvaluationResult",
    "ItemFetchError",
]
