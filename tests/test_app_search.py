"""
Tests for the ApplicationProvider.

Tests fuzzy matching against a fixed catalog, relevance tiers and the
frecency boost.
"""

import pytest

from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import Category, OpenApplication
from omnibar.search.providers.applications import AppEntry, ApplicationProvider
from omnibar.services.frecency import FrecencyService

CATALOG = [
    AppEntry("firefox", "Firefox", "/usr/bin/firefox", "Web Browser"),
    AppEntry("safari", "Safari", "/Applications/Safari.app"),
    AppEntry("files", "Files", "/usr/bin/nautilus", "File Manager"),
    AppEntry("calc", "Calculator", "/usr/bin/gnome-calculator"),
    AppEntry("term", "Terminal", "/usr/bin/kgx"),
]


def _search(query, **kwargs):
    provider = ApplicationProvider(lambda: CATALOG, **kwargs)
    return list(provider.search(query, CancellationToken()))


class TestAppMatching:

    def test_exact_name_scores_highest(self):
        results = _search("firefox")
        assert results[0].title == "Firefox"
        assert results[0].relevance_score == 1.0

    def test_prefix_match(self):
        results = _search("saf")
        assert results[0].title == "Safari"
        assert results[0].relevance_score == 0.9

    def test_typo_still_matches(self):
        titles = [r.title for r in _search("firefx")]
        assert "Firefox" in titles

    def test_unrelated_query_is_filtered(self):
        assert _search("zzzzqqq") == []

    def test_result_shape(self):
        result = _search("Terminal")[0]
        assert result.category == Category.APPLICATION
        assert result.action == OpenApplication("/usr/bin/kgx")
        assert result.subtitle == "Application"

    def test_description_becomes_subtitle(self):
        assert _search("Files")[0].subtitle == "File Manager"

    def test_max_results(self):
        assert len(_search("a", max_results=2, fuzzy_threshold=0)) <= 2


class TestEmptyQuery:

    @pytest.mark.parametrize("query", ["", "   "])
    def test_lists_catalog(self, query):
        results = _search(query)
        assert [r.id for r in results] == [app.id for app in CATALOG]
        assert all(r.relevance_score == 0.5 for r in results)

    def test_frequent_apps_come_first(self, tmp_db):
        frecency = FrecencyService(tmp_db)
        try:
            frecency.record_launch("/usr/bin/kgx")
            frecency.record_launch("/usr/bin/kgx")
            frecency.record_launch("/usr/bin/gnome-calculator")
            ids = [r.id for r in _search("", frecency=frecency)]
        finally:
            frecency.close()
        assert ids == ["term", "calc", "firefox", "safari", "files"]

    def test_history_for_uninstalled_app_is_ignored(self, tmp_db):
        frecency = FrecencyService(tmp_db)
        try:
            frecency.record_launch("/opt/removed/app")
            ids = [r.id for r in _search("", frecency=frecency)]
        finally:
            frecency.close()
        assert ids == [app.id for app in CATALOG]

    def test_suggestions_are_capped(self, tmp_db):
        catalog = [AppEntry(f"app{i}", f"App {i}", f"/apps/{i}") for i in range(30)]
        frecency = FrecencyService(tmp_db)
        try:
            frecency.record_launch("/apps/29")
            provider = ApplicationProvider(lambda: catalog, frecency=frecency)
            results = list(provider.search("", CancellationToken()))
        finally:
            frecency.close()
        assert len(results) == 20
        assert results[0].id == "app29"


class TestFrecencyBoost:

    def test_frequent_app_is_boosted(self, tmp_db):
        frecency = FrecencyService(tmp_db)
        try:
            before = _search("Calc", frecency=frecency)[0].relevance_score
            for _ in range(5):
                frecency.record_launch("/usr/bin/gnome-calculator")
            after = _search("Calc", frecency=frecency)[0].relevance_score
        finally:
            frecency.close()
        assert after > before

    def test_boost_never_exceeds_one(self, tmp_db):
        frecency = FrecencyService(tmp_db)
        try:
            for _ in range(20):
                frecency.record_launch("/usr/bin/firefox")
            assert _search("firefox", frecency=frecency)[0].relevance_score == 1.0
        finally:
            frecency.close()


def test_cancelled_search_yields_nothing():
    token = CancellationToken()
    token.cancel()
    provider = ApplicationProvider(lambda: CATALOG)
    assert list(provider.search("firefox", token)) == []
