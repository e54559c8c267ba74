"""Tests for raindrop_autotagger.utils."""

import pytest

from raindrop_autotagger.utils import (
    _format_tags,
    _normalize_tag_name,
    deduplicate_tags,
    edit_distance,
    filter_ignored_tags,
)


# ---------------------------------------------------------------------------
# edit_distance
# ---------------------------------------------------------------------------

class TestEditDistance:
    @pytest.mark.parametrize("a, b, expected", [
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("news", "new", 1),
        ("machine learning", "machine-learning", 1),
        ("abc", "abc", 0),
        ("abc", "xyz", 3),
    ])
    def test_known_distances(self, a, b, expected):
        assert edit_distance(a, b) == expected

    def test_empty_against_string(self):
        assert edit_distance("", "") == 0
        assert edit_distance("", "python") == 6
        assert edit_distance("python", "") == 6

    @pytest.mark.parametrize("a, b", [
        ("kitten", "sitting"),
        ("", "tag"),
        ("reddit", "AI"),
        ("Machine-Learning", "machine learning"),
    ])
    def test_symmetric(self, a, b):
        assert edit_distance(a, b) == edit_distance(b, a)

    @pytest.mark.parametrize("value", ["", "a", "raindrop", "Machine Learning"])
    def test_identity(self, value):
        assert edit_distance(value, value) == 0

    def test_case_sensitive(self):
        assert edit_distance("News", "news") == 1

    def test_insertion_deletion_substitution(self):
        assert edit_distance("tag", "tags") == 1
        assert edit_distance("tags", "tag") == 1
        assert edit_distance("tag", "tog") == 1


# ---------------------------------------------------------------------------
# deduplicate_tags
# ---------------------------------------------------------------------------

class TestDeduplicateTags:
    def test_first_occurrence_wins(self):
        assert deduplicate_tags(["news", "New", "Tech"]) == ["news", "Tech"]

    def test_hyphen_and_case_variants(self):
        tags = ["machine learning", "Machine-Learning", "AI", "reddit"]
        assert deduplicate_tags(tags) == ["machine learning", "AI", "reddit"]

    def test_plural_dropped(self):
        assert deduplicate_tags(["recipe", "recipes", "cooking"]) == ["recipe", "cooking"]

    def test_threshold_is_absolute(self):
        # Short tags within two edits collapse even though they share no letters
        assert deduplicate_tags(["ai", "ml"]) == ["ai"]
        assert deduplicate_tags(["python", "pytorch"]) == ["python", "pytorch"]

    def test_distance_three_kept(self):
        assert deduplicate_tags(["kitten", "sitting"]) == ["kitten", "sitting"]

    def test_order_dependent(self):
        assert deduplicate_tags(["News", "news"]) == ["News"]
        assert deduplicate_tags(["news", "News"]) == ["news"]

    def test_compares_only_with_accepted(self):
        # "cards" is 2 from the dropped "cart" but 3 from the accepted "cat"
        assert deduplicate_tags(["cat", "cart", "cards"]) == ["cat", "cards"]

    def test_empty(self):
        assert deduplicate_tags([]) == []

    def test_custom_threshold(self):
        assert deduplicate_tags(["news", "New"], max_distance=0) == ["news", "New"]

    @pytest.mark.parametrize("tags", [
        ["news", "New", "Tech"],
        ["machine learning", "Machine-Learning", "AI", "reddit"],
        ["a", "b", "c", "abcdef", "abcdeg"],
        [],
    ])
    def test_idempotent(self, tags):
        once = deduplicate_tags(tags)
        assert deduplicate_tags(once) == once

    @pytest.mark.parametrize("tags", [
        ["python", "Python", "pythons", "javascript", "java", "scala"],
        ["x", "y", "zz"],
    ])
    def test_subsequence_of_input(self, tags):
        result = deduplicate_tags(tags)
        assert len(result) <= len(tags)
        it = iter(tags)
        assert all(tag in it for tag in result)


# ---------------------------------------------------------------------------
# filter_ignored_tags / helpers
# ---------------------------------------------------------------------------

class TestFilterIgnoredTags:
    def test_case_insensitive(self):
        assert filter_ignored_tags(["IFTTT", "cooking", "Reddit"], ("ifttt", "reddit")) == ["cooking"]

    def test_no_ignored(self):
        assert filter_ignored_tags(["a", "b"], ()) == ["a", "b"]

    def test_preserves_order(self):
        assert filter_ignored_tags(["z", "reddit", "a"], ("reddit",)) == ["z", "a"]


class TestHelpers:
    def test_normalize_tag_name(self):
        assert _normalize_tag_name("Machine-Learning") == "machine-learning"
        assert _normalize_tag_name(None) == ""

    def test_format_tags(self):
        assert _format_tags(["a", "b"]) == "a, b"
        assert _format_tags([]) == "-"
