#!/usr/bin/env python3
"""Parse blacklist text into rules.

One rule per line. Parsing is lenient and never raises: any line that
survives the filters below becomes a rule, however odd its pattern.

Per line:
- blank lines and lines starting with ``#`` or ``//`` are dropped
- a trailing comment (from the first ``#`` or ``//``) is removed
- a leading ``category:`` qualifier is removed, except ``rating:``
- the rest is lower-cased
- lines containing `` AND `` or `` && `` become conjunctive rules

Example:
    >>> rules = parse("# comment\\n\\n1girl\\nsolo // trailing\\n")
    >>> rules.patterns()
    ['1girl', 'solo']
"""

import re
from typing import List, Optional

from tagblacklist.core.constants import COMMENT_MARKERS, CONJUNCTION_SEPARATORS, RATING_PREFIX
from tagblacklist.core.logging import Logger, get_logger
from tagblacklist.rules.engine import Rule, RuleSet, split_conjunction

_INLINE_COMMENT_RE = re.compile("(?:" + "|".join(re.escape(m) for m in COMMENT_MARKERS) + ").*")
# artist:someone -> someone, only the first qualifier is removed
_NAMESPACE_RE = re.compile(r"^[^\s:]+:(?=.)")


class RuleParser:
    """Turns blacklist text into an ordered RuleSet."""

    def __init__(self, logger: Optional[Logger] = None):
        """Initialize parser.

        Args:
            logger: Logger for parse diagnostics (global logger if omitted)
        """
        self.logger = logger or get_logger()

    def parse(self, text: Optional[str], name: Optional[str] = None) -> RuleSet:
        """Parse blacklist text.

        Args:
            text: Raw multi-line blacklist text
            name: Blacklist name recorded on the RuleSet

        Returns:
            Rules in line order
        """
        rules: List[Rule] = []

        for line in (text or "").splitlines():
            rule = self.parse_line(line)
            if rule is not None:
                rules.append(rule)

        self.logger.debug("Parsed blacklist", blacklist=name, rules=len(rules))
        return RuleSet(rules, name=name)

    def parse_line(self, line: str) -> Optional[Rule]:
        """Parse a single line.

        Only the exact lower-case ``rating:`` prefix is kept. Any other
        qualifier is stripped, so ``Rating:E*`` becomes ``e*`` and hits every
        tag starting with ``e``.

        Returns:
            Rule, or None for blank and comment lines
        """
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_MARKERS):
            return None

        stripped = _INLINE_COMMENT_RE.sub("", stripped).strip()
        if not stripped:
            return None

        if not stripped.startswith(RATING_PREFIX):
            stripped = _NAMESPACE_RE.sub("", stripped, count=1).strip()

        is_conjunctive = any(sep in stripped for sep in CONJUNCTION_SEPARATORS)
        conjuncts = []
        if is_conjunctive:
            conjuncts = [part.lower() for part in split_conjunction(stripped, ignore_case=False)]

        return Rule(
            pattern=stripped.lower(),
            is_conjunctive=is_conjunctive,
            conjuncts=conjuncts,
        )


def parse(text: Optional[str], name: Optional[str] = None) -> RuleSet:
    """Parse blacklist text with a default RuleParser."""
    return RuleParser().parse(text, name=name)
