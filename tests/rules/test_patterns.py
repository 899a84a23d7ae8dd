#!/usr/bin/env python3
"""Tests for wildcard tag matching."""

import re

import pytest

from tagblacklist.rules.patterns import compile_wildcard, matches_any, wildcard_match


class TestWildcardMatch:
    """Tests for wildcard_match."""

    @pytest.mark.parametrize(
        "pattern,tag,expected",
        [
            ("rating:e*", "rating:explicit", True),
            ("1girl", "1girls", False),
            ("*solo*", "not_solo_here", True),
            ("1girl", "1girl", True),
            ("solo", "not_solo", False),
            ("*_hair", "red_hair", True),
            ("*_hair", "red_hair_ornament", False),
            ("red*ornament", "red_hair_ornament", True),
            ("*", "anything", True),
            ("*", "", True),
            ("", "", True),
            ("", "solo", False),
        ],
    )
    def test_cases(self, pattern, tag, expected):
        assert wildcard_match(pattern, tag) is expected

    def test_star_matches_empty_run(self):
        assert wildcard_match("solo*", "solo")
        assert wildcard_match("*solo", "solo")

    def test_case_insensitive(self):
        assert wildcard_match("Rating:E*", "rating:explicit")
        assert wildcard_match("rating:e*", "RATING:Explicit")

    def test_question_mark_is_literal(self):
        assert not wildcard_match("sol?", "solo")
        assert wildcard_match("what?", "what?")

    def test_regex_metacharacters_are_literal(self):
        assert wildcard_match("c++", "c++")
        assert wildcard_match("[unclosed", "[unclosed")
        assert not wildcard_match("a.c", "abc")
        assert wildcard_match("(parens)*", "(parens)_tag")

    def test_conjunction_text_matches_literally(self):
        """An unsplit conjunctive pattern is just a literal pattern."""
        assert not wildcard_match("red_hair and blue_eyes", "red_hair")
        assert wildcard_match("red_hair and blue_eyes", "red_hair and blue_eyes")


class TestCompileWildcard:
    """Tests for compile_wildcard."""

    def test_returns_pattern(self):
        assert isinstance(compile_wildcard("a*b"), re.Pattern)

    def test_compiled_is_cached(self):
        assert compile_wildcard("cached*") is compile_wildcard("cached*")

    def test_compiled_is_lower_case(self):
        assert compile_wildcard("ABC").fullmatch("abc")


class TestMatchesAny:
    """Tests for matches_any."""

    def test_matches_any(self):
        tags = ["1girl", "solo", "rating:safe"]
        assert matches_any("sol*", tags)
        assert matches_any("rating:s*", tags)
        assert not matches_any("2girls", tags)

    def test_empty_pool(self):
        assert not matches_any("*", [])
