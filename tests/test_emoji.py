"""
Tests for the EmojiProvider.
"""

import pytest

from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import Category, CopyToClipboard
from omnibar.search.providers.emoji import EMOJI_TABLE, EmojiProvider


def _search(query, **kwargs):
    return list(EmojiProvider(**kwargs).search(query, CancellationToken()))


class TestEmojiSearch:

    @pytest.mark.parametrize("query", ["fox", "heart", "", "g: fox"])
    def test_needs_colon_prefix(self, query):
        assert _search(query) == []

    def test_bare_prefix_browses_table(self):
        results = _search(":")
        assert len(results) == len(EMOJI_TABLE)
        assert results[0].title == "😀  Grinning Face"
        assert all(r.relevance_score == 0.5 for r in results)

    def test_name_substring_is_case_insensitive(self):
        titles = [r.title for r in _search(":HEART")]
        assert "❤️  Red Heart" in titles
        assert "💘  Heart with Arrow" in titles
        assert "🦊  Fox" not in titles

    def test_exact_name_scores_highest(self):
        results = _search(": fox")
        assert [r.title for r in results] == ["🦊  Fox"]
        assert results[0].relevance_score == 1.0

    def test_selecting_copies_character(self):
        result = _search(":pizza")[0]
        assert result.category == Category.EMOJI
        assert result.action == CopyToClipboard("🍕")
        assert result.subtitle.startswith("Food")

    def test_no_match(self):
        assert _search(":zzzzqqq") == []

    def test_max_results(self):
        assert len(_search(":", max_results=3)) == 3

    def test_custom_table(self):
        results = _search(":wave", table=[("👋", "Waving Hand", "People")])
        assert [r.action for r in results] == [CopyToClipboard("👋")]


def test_cancelled_search_yields_nothing():
    token = CancellationToken()
    token.cancel()
    assert list(EmojiProvider().search(":", token)) == []
