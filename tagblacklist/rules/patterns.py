#!/usr/bin/env python3
"""Wildcard matching between blacklist patterns and tags.

A pattern matches a whole tag. ``*`` matches any run of characters,
including none. Every other character matches itself, so ``?`` and
``[...]`` are literal, unlike shell globs. Matching ignores case.

Example:
    >>> wildcard_match("rating:e*", "rating:explicit")
    True
    >>> wildcard_match("1girl", "1girls")
    False
    >>> wildcard_match("*solo*", "not_solo_here")
    True
"""

import re
from functools import lru_cache
from typing import Iterable, Pattern

WILDCARD = "*"


@lru_cache(maxsize=1024)
def compile_wildcard(pattern: str) -> Pattern:
    """Compile a wildcard pattern into an anchored regex.

    Args:
        pattern: Wildcard pattern (already lower-cased or not)

    Returns:
        Compiled regex matching the whole (lower-cased) tag
    """
    # Escape the literal runs between stars, then join them with .*
    literal_runs = pattern.lower().split(WILDCARD)
    regex_pattern = ".*".join(re.escape(run) for run in literal_runs)
    return re.compile(regex_pattern, re.DOTALL)


def wildcard_match(pattern: str, tag: str) -> bool:
    """Check if a tag matches a wildcard pattern.

    Args:
        pattern: Wildcard pattern
        tag: Tag to test

    Returns:
        True if the entire tag matches
    """
    return compile_wildcard(pattern).fullmatch(tag.lower()) is not None


def matches_any(pattern: str, tags: Iterable[str]) -> bool:
    """Check if a wildcard pattern matches at least one tag."""
    compiled = compile_wildcard(pattern)
    return any(compiled.fullmatch(tag.lower()) is not None for tag in tags)
