"""
Web Search Provider - Open web searches in the default browser.

Prefix patterns pick a single engine:
  ? query     → Default search engine
  g: query    → Google
  w: query    → Wikipedia
  gh: query   → GitHub
  yt: query   → YouTube

Without a prefix, queries of at least ``min_query_length`` characters get
low-relevance suggestions for the general engines, so they sink below
local matches.
"""

import urllib.parse
from typing import Iterator

from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import CustomCategory, OpenURL, Result
from omnibar.search.provider import Provider

WEB = CustomCategory("web")

DEFAULT_ENGINES = {
    "?": {"name": "DuckDuckGo", "url": "https://duckduckgo.com/?q={query}", "icon": "web-browser"},
    "g:": {"name": "Google", "url": "https://www.google.com/search?q={query}", "icon": "web-browser"},
    "w:": {"name": "Wikipedia", "url": "https://en.wikipedia.org/w/index.php?search={query}", "icon": "accessories-dictionary"},
    "gh:": {"name": "GitHub", "url": "https://github.com/search?q={query}", "icon": "web-browser"},
    "yt:": {"name": "YouTube", "url": "https://www.youtube.com/results?search_query={query}", "icon": "applications-multimedia"},
}

SUGGESTION_ENGINES = [
    {"name": "Google", "url": "https://www.google.com/search?q={query}", "icon": "web-browser"},
    {"name": "DuckDuckGo", "url": "https://duckduckgo.com/?q={query}", "icon": "web-browser"},
    {"name": "Bing", "url": "https://www.bing.com/search?q={query}", "icon": "web-browser"},
]

PREFIXED_SCORE = 1.0
SUGGESTION_SCORE = 0.3


class WebSearchProvider(Provider):
    """Turn queries into web search results."""

    name = "web_search"

    def __init__(self, engines: dict = None, suggestions: list = None, min_query_length: int = 3):
        self.engines = engines or DEFAULT_ENGINES
        self.suggestions = SUGGESTION_ENGINES if suggestions is None else suggestions
        self.min_query_length = min_query_length

    def search(self, query: str, cancel: CancellationToken) -> Iterator[Result]:
        q = query.strip()

        # Longest prefix first so "gh:" is not shadowed by "g:"
        for prefix in sorted(self.engines, key=len, reverse=True):
            if q.startswith(prefix):
                term = q[len(prefix):].strip()
                if term:
                    yield self._to_result(self.engines[prefix], term, PREFIXED_SCORE)
                return

        if len(q) < self.min_query_length:
            return

        for engine in self.suggestions:
            if cancel.cancelled:
                return
            yield self._to_result(engine, q, SUGGESTION_SCORE)

    def _to_result(self, engine: dict, term: str, score: float) -> Result:
        url = engine["url"].format(query=urllib.parse.quote_plus(term))
        return Result(
            id=f"web_{engine['name']}_{term}",
            title=f"Search {engine['name']} for \"{term}\"",
            subtitle=url.split("/")[2],
            icon=engine.get("icon", "web-browser"),
            category=WEB,
            action=OpenURL(url),
            relevance_score=score,
        )
