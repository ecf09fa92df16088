"""
Tests for Ranker weighting, ordering and deduplication.
"""

import random

import pytest

from omnibar.errors import ConfigError
from omnibar.search.models import Category, CustomCategory
from omnibar.search.ranker import Ranker, RankingConfig


class TestRankingConfig:

    @pytest.mark.parametrize("weight", [0.0, -1.0, 2.01])
    def test_rejects_weight_out_of_range(self, weight):
        with pytest.raises(ConfigError):
            RankingConfig(weights={"file": weight})

    def test_accepts_upper_bound(self):
        config = RankingConfig(weights={"application": 2.0})
        assert config.weight(Category.APPLICATION) == 2.0

    def test_unknown_category_uses_defaults(self):
        config = RankingConfig()
        assert config.weight(CustomCategory("emoji-pack")) == 1.0
        assert config.priority(CustomCategory("emoji-pack")) == 4


class TestOrdering:

    def test_weight_breaks_equal_raw_scores(self, result_factory):
        ranker = Ranker(RankingConfig(weights={"application": 1.0, "file": 0.6}))
        app = result_factory("safari", "Safari", 0.9, Category.APPLICATION)
        doc = result_factory("notes", "Safari Notes", 0.9, Category.FILE)
        assert [r.title for r in ranker.rank([doc, app])] == ["Safari", "Safari Notes"]

    def test_category_priority_breaks_equal_weighted_scores(self, result_factory):
        ranker = Ranker()
        action = result_factory("a", "Zeta", 0.5, Category.SYSTEM_ACTION)
        app = result_factory("b", "Zeta", 0.5, Category.APPLICATION)
        assert [r.category for r in ranker.rank([action, app])] == [
            Category.APPLICATION, Category.SYSTEM_ACTION,
        ]

    def test_title_is_final_tiebreak(self, result_factory):
        ranker = Ranker()
        results = [result_factory(t, t, 0.5) for t in ["Mail", "Calendar", "Notes"]]
        assert [r.title for r in ranker.rank(results)] == ["Calendar", "Mail", "Notes"]

    def test_ordering_is_deterministic_for_any_input_order(self, result_factory):
        ranker = Ranker(RankingConfig(weights={"file": 0.8}))
        results = [
            result_factory(f"id{i}", f"Item {i % 3}", (i % 4) / 4,
                           Category.FILE if i % 2 else Category.APPLICATION)
            for i in range(20)
        ]
        expected = ranker.rank(results)
        for seed in range(5):
            shuffled = results[:]
            random.Random(seed).shuffle(shuffled)
            assert ranker.rank(shuffled) == expected

    def test_max_results_truncates(self, result_factory):
        ranker = Ranker(RankingConfig(max_results=2))
        results = [result_factory(str(i), score=i / 10) for i in range(5)]
        assert [r.id for r in ranker.rank(results)] == ["4", "3"]


class TestDeduplication:

    def test_keeps_higher_scoring_duplicate(self, result_factory):
        ranker = Ranker()
        low = result_factory("safari", "Safari (old)", 0.4)
        high = result_factory("safari", "Safari", 0.8)
        ranked = ranker.rank([low, high])
        assert len(ranked) == 1
        assert ranked[0].relevance_score == 0.8

    def test_same_id_different_category_is_not_duplicate(self, result_factory):
        ranker = Ranker()
        a = result_factory("x", "X", 0.5, Category.APPLICATION)
        b = result_factory("x", "X", 0.5, Category.FILE)
        assert len(ranker.rank([a, b])) == 2

    def test_incremental_batches_keep_best(self, result_factory):
        acc = Ranker().accumulator()
        acc.add([result_factory("safari", "Safari", 0.9)], source="apps")
        ordered = acc.add([result_factory("safari", "Safari", 0.3)], source="spotlight")
        assert len(ordered) == 1
        assert ordered[0].relevance_score == 0.9

    def test_discard_restores_other_sources_copy(self, result_factory):
        acc = Ranker().accumulator()
        acc.add([result_factory("safari", "Safari", 0.4)], source="a")
        acc.add([result_factory("safari", "Safari", 0.9), result_factory("mail", "Mail", 0.5)], source="b")
        ordered = acc.discard("b")
        assert [(r.id, r.relevance_score) for r in ordered] == [("safari", 0.4)]

    def test_incremental_matches_one_shot(self, result_factory):
        ranker = Ranker()
        first = [result_factory("a", "A", 0.3), result_factory("b", "B", 0.7)]
        second = [result_factory("c", "C", 0.5), result_factory("a", "A", 0.9)]
        acc = ranker.accumulator()
        acc.add(first, source="one")
        assert acc.add(second, source="two") == ranker.rank(first + second)
