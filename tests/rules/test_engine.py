#!/usr/bin/env python3
"""Tests for rules, rule sets and the rule evaluator."""

import pytest

from tagblacklist.rules.engine import Rule, RuleEvaluator, RuleSet, split_conjunction
from tagblacklist.rules.parser import parse


class TestSplitConjunction:
    """Tests for split_conjunction."""

    def test_split_and(self):
        assert split_conjunction("red_hair AND blue_eyes") == ["red_hair", "blue_eyes"]

    def test_split_lowercase_and(self):
        """Parsed patterns are lower-cased, so the separator is too."""
        assert split_conjunction("red_hair and blue_eyes") == ["red_hair", "blue_eyes"]

    def test_split_ampersands(self):
        assert split_conjunction("a && b && c*") == ["a", "b", "c*"]

    def test_no_separator(self):
        assert split_conjunction("android") == ["android"]

    def test_exact_case(self):
        assert split_conjunction("cats and dogs AND birds", ignore_case=False) == [
            "cats and dogs",
            "birds",
        ]


class TestRule:
    """Tests for the Rule dataclass."""

    def test_sub_patterns(self):
        assert Rule("a and b", is_conjunctive=True).sub_patterns == ["a", "b"]
        assert Rule("a and b").sub_patterns == ["a and b"]

    def test_hit_count(self):
        rule = Rule("solo", hits=[1, 2])
        assert rule.hit_count == 2


class TestRuleSet:
    """Tests for RuleSet."""

    def test_sequence_behaviour(self):
        rules = RuleSet([Rule("a"), Rule("b")], name="x")
        assert len(rules) == 2
        assert rules[1].pattern == "b"
        assert [r.pattern for r in rules] == ["a", "b"]
        assert rules.patterns() == ["a", "b"]

    def test_rules_returns_copy(self):
        rules = RuleSet([Rule("a")])
        rules.rules.append(Rule("b"))
        assert len(rules) == 1

    def test_reset_hits(self):
        rules = RuleSet([Rule("a", hits=[1]), Rule("b", hits=[2, 3])])
        rules.reset_hits()
        assert all(rule.hits == [] for rule in rules)

    def test_disable_and_toggle(self):
        rules = RuleSet([Rule("a"), Rule("b")])

        rules.set_disabled(0, True)
        assert rules.enabled_rules() == [rules[1]]

        rules.toggle(0)
        assert not rules[0].is_disabled
        assert len(rules.enabled_rules()) == 2

    def test_disable_out_of_range(self):
        with pytest.raises(IndexError):
            RuleSet().set_disabled(0, True)


class TestRuleEvaluator:
    """Tests for RuleEvaluator.evaluate."""

    @pytest.fixture
    def evaluator(self):
        return RuleEvaluator()

    def test_simple_match(self, evaluator, make_item):
        item = make_item(1, general=["1girl", "solo"])
        assert evaluator.evaluate(item, Rule("solo"))
        assert not evaluator.evaluate(item, Rule("2girls"))

    def test_any_category_matches(self, evaluator, make_item):
        item = make_item(1, general=[], artist=["someone"], metadata=["highres"])
        assert evaluator.evaluate(item, parse("artist:someone")[0])
        assert evaluator.evaluate(item, Rule("highres"))

    def test_rating_rule(self, evaluator, make_item):
        item = make_item(1, general=["solo"], rating="explicit")
        assert evaluator.evaluate(item, parse("rating:e*")[0])
        assert not evaluator.evaluate(item, parse("rating:q*")[0])

    def test_conjunctive_rule_hit(self, evaluator, make_item):
        rule = Rule("red_hair AND blue_eyes", is_conjunctive=True)
        item = make_item(1, general=["red_hair"], character=["blue_eyes"])
        assert evaluator.evaluate(item, rule)

    def test_conjunctive_rule_parsed(self, evaluator, make_item):
        rule = parse("red_hair AND blue_eyes")[0]
        item = make_item(1, general=["blue_eyes", "red_hair"])
        assert evaluator.evaluate(item, rule)

    def test_conjunctive_rule_missing_tag(self, evaluator, make_item):
        rule = parse("red_hair AND blue_eyes")[0]
        assert not evaluator.evaluate(make_item(1, general=["red_hair"]), rule)
        assert not evaluator.evaluate(make_item(2, general=["blue_eyes"]), rule)

    def test_conjunctive_wildcards(self, evaluator, make_item):
        rule = parse("*_hair && rating:q*")[0]
        assert evaluator.evaluate(make_item(1, general=["red_hair"], rating="questionable"), rule)
        assert not evaluator.evaluate(make_item(2, general=["red_hair"], rating="safe"), rule)

    def test_conjunction_is_per_sub_pattern(self, evaluator, make_item):
        """Each sub-pattern may be satisfied by a different tag."""
        rule = parse("a* AND *b")[0]
        assert evaluator.evaluate(make_item(1, general=["ax", "xb"]), rule)

    def test_whole_pattern_also_checked(self, evaluator, make_item):
        """A conjunctive rule also hits when the unsplit pattern matches a tag."""
        rule = Rule("x && y", is_conjunctive=True)
        assert evaluator.evaluate(make_item(1, general=["x && y"]), rule)

    def test_lowercase_and_inside_conjunct(self, evaluator, make_item):
        rule = parse("cats and dogs AND birds")[0]
        assert evaluator.evaluate(make_item(1, general=["cats and dogs", "birds"]), rule)
        assert not evaluator.evaluate(make_item(2, general=["cats", "dogs", "birds"]), rule)

    def test_non_conjunctive_and_text(self, evaluator, make_item):
        rule = parse("red_hair and blue_eyes")[0]
        assert not evaluator.evaluate(make_item(1, general=["red_hair", "blue_eyes"]), rule)

    def test_disabled_rule_never_hits(self, evaluator, make_item):
        rule = Rule("solo", is_disabled=True)
        assert not evaluator.evaluate(make_item(1, general=["solo"]), rule)

    def test_evaluate_does_not_record_hits(self, evaluator, make_item):
        rule = Rule("solo")
        evaluator.evaluate(make_item(1, general=["solo"]), rule)
        assert rule.hits == []

    def test_matching_rules(self, evaluator, make_item):
        rules = parse("solo\n1girl\nrating:e*")
        rules.set_disabled(1, True)
        matched = evaluator.matching_rules(make_item(1, general=["1girl", "solo"]), rules)
        assert [r.pattern for r in matched] == ["solo"]
