#!/usr/bin/env python3
"""Rendering of blacklist results.

Text output uses Jinja2 templates and mirrors the blacklist sidebar:
title with hit/total counts, the available blacklists with the selected one
marked, and each rule with its hit count. YAML output is meant for scripts.

Example:
    >>> print(render_text(result, names=["Safe mode"], selected="Safe mode"))
    Blacklist 2/10
    ...
"""

from typing import Any, Dict, List, Optional, Sequence

import jinja2
import yaml

from tagblacklist.rules.aggregator import EvaluationResult
from tagblacklist.rules.engine import RuleSet

SIDEBAR_TEMPLATE = """\
Blacklist {{ result.hit_count }}/{{ result.total_item_count }}
{% if names %}
{% for name in names -%}
{{ "*" if name == selected else " " }} {{ name }}
{% endfor %}
{% else %}
  There is no blacklists
{% endif %}

{% for rule in rules -%}
{{ "%-*s"|format(width, rule.pattern) }}  {{ rule.hits|length }}{{ "  (disabled)" if rule.is_disabled else "" }}
{% endfor %}"""

RULES_TEMPLATE = """\
{% for rule in rules -%}
{{ loop.index0 }}. {{ rule.pattern }}{{ "  [AND]" if rule.is_conjunctive else "" }}{{ "  (disabled)" if rule.is_disabled else "" }}
{% else -%}
(no rules)
{% endfor %}"""


def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
        undefined=jinja2.StrictUndefined,
        autoescape=False,
    )


_env = _environment()


def render_text(
    result: EvaluationResult,
    names: Optional[Sequence[str]] = None,
    selected: Optional[str] = None,
) -> str:
    """Render a result as sidebar text.

    Args:
        result: Result of a pass
        names: Blacklist names to list
        selected: Name of the selected blacklist

    Returns:
        Rendered text
    """
    rules = list(result.per_rule_hits)
    width = max((len(rule.pattern) for rule in rules), default=0)
    template = _env.from_string(SIDEBAR_TEMPLATE)
    return template.render(
        result=result,
        names=list(names or []),
        selected=selected,
        rules=rules,
        width=width,
    ).rstrip("\n")


def render_rules(rule_set: RuleSet) -> str:
    """Render the parsed rules of a blacklist, one per line."""
    return _env.from_string(RULES_TEMPLATE).render(rules=list(rule_set)).rstrip("\n")


def result_to_dict(result: EvaluationResult) -> Dict[str, Any]:
    """Convert a result into plain data.

    Hit ids are sorted with numeric ids before string ids.
    """
    rules: List[Dict[str, Any]] = [
        {
            "pattern": rule.pattern,
            "conjunctive": rule.is_conjunctive,
            "disabled": rule.is_disabled,
            "hits": list(rule.hits),
        }
        for rule in result.per_rule_hits
    ]
    return {
        "blacklist": result.per_rule_hits.name,
        "total": result.total_item_count,
        "hit_ids": sorted(result.total_hit_ids, key=lambda i: (isinstance(i, str), i)),
        "rules": rules,
    }


def render_yaml(result: EvaluationResult) -> str:
    return yaml.safe_dump(result_to_dict(result), default_flow_style=False, sort_keys=False)
