"""
Application Provider - Installed application search with fuzzy matching.

Candidates are picked with rapidfuzz's weighted ratio against app names,
then scored with the shared relevance tiers so that an exact or prefix hit
beats a typo match. Apps the user launches often get a small frecency boost.

The catalog itself is supplied by the host (desktop entries, a bundle
index, ...), as a callable returning AppEntry objects.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from rapidfuzz import fuzz, process, utils

from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import Category, OpenApplication, Result
from omnibar.search.provider import Provider
from omnibar.search.scoring import relevance
from omnibar.services.frecency import FrecencyService

DEFAULT_SUGGESTIONS = 20
SUGGESTION_SCORE = 0.5


@dataclass(frozen=True)
class AppEntry:
    id: str
    name: str
    path: str
    description: str = ""
    icon: str = "application-x-executable"


class ApplicationProvider(Provider):
    """Search installed applications with typo-tolerant matching."""

    name = "applications"

    def __init__(
        self,
        catalog: Callable[[], list[AppEntry]],
        frecency: Optional[FrecencyService] = None,
        max_results: int = 30,
        fuzzy_threshold: int = 50,
    ):
        self.catalog = catalog
        self.frecency = frecency
        self.max_results = max_results
        self.fuzzy_threshold = fuzzy_threshold

    def search(self, query: str, cancel: CancellationToken) -> Iterator[Result]:
        apps = self.catalog()

        if not query or not query.strip():
            for app in self._suggestions(apps):
                if cancel.cancelled:
                    return
                yield self._to_result(app, SUGGESTION_SCORE)
            return

        by_id = {app.id: app for app in apps}
        # Match against name only, descriptions dilute relevance
        choices = {app.id: app.name for app in apps}

        matches = process.extract(
            query.strip(),
            choices,
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            limit=self.max_results,
            score_cutoff=self.fuzzy_threshold,
        )

        # matches: list of (matched_string, score, key)
        for matched_name, _score, app_id in matches:
            if cancel.cancelled:
                return
            app = by_id[app_id]
            yield self._to_result(app, relevance(matched_name, query))

    def _suggestions(self, apps: list[AppEntry]) -> list[AppEntry]:
        """Most frequently used apps first, topped up from the catalog."""
        if self.frecency is None:
            return apps[:DEFAULT_SUGGESTIONS]

        by_path = {app.path: app for app in apps}
        frequent = [
            by_path[app_id]
            for app_id, _score, _count, _last in self.frecency.get_top_apps(limit=DEFAULT_SUGGESTIONS)
            if app_id in by_path
        ]
        seen = {app.path for app in frequent}
        rest = [app for app in apps if app.path not in seen]
        return (frequent + rest)[:DEFAULT_SUGGESTIONS]

    def _to_result(self, app: AppEntry, score: float) -> Result:
        if self.frecency is not None:
            score = min(1.0, score + self.frecency.boost_for(app.path))
        return Result(
            id=app.id,
            title=app.name,
            subtitle=app.description or "Application",
            icon=app.icon,
            category=Category.APPLICATION,
            action=OpenApplication(app.path),
            relevance_score=score,
        )
