"""
Ranker - Normalizes per-provider scores and merges them into one ordering.

Raw relevance scores are provider-local, so each one is multiplied by a
per-category weight before merging. Ordering key:

  (weighted score desc, category priority asc, title asc, id asc)

The trailing id keeps the order total when two results share a title,
which makes ranking reproducible for identical input.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from omnibar.errors import ConfigError
from omnibar.search.models import Category, Result, ResultCategory

# Lower sorts first when weighted scores tie
DEFAULT_PRIORITIES = {
    Category.ACTION.key: 0,
    Category.APPLICATION.key: 1,
    "custom:calculator": 1,
    Category.FILE.key: 2,
    Category.SYSTEM_ACTION.key: 3,
    "custom:web": 5,
    Category.SUGGESTION.key: 6,
}


@dataclass
class RankingConfig:
    """Per-category weights and tiebreak priorities, keyed by category key."""
    weights: dict[str, float] = field(default_factory=dict)
    priorities: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_PRIORITIES))
    default_weight: float = 1.0
    default_priority: int = 4
    max_results: Optional[int] = None

    def __post_init__(self):
        for key, weight in [*self.weights.items(), ("default", self.default_weight)]:
            if not 0.0 < weight <= 2.0:
                raise ConfigError(f"Weight for '{key}' must be in (0, 2], got {weight}")

    def weight(self, category: ResultCategory) -> float:
        return self.weights.get(category.key, self.default_weight)

    def priority(self, category: ResultCategory) -> int:
        return self.priorities.get(category.key, self.default_priority)


@dataclass(frozen=True)
class RankedResult:
    """A result paired with its cross-provider comparable score."""
    result: Result
    weighted_score: float
    priority: int

    @property
    def sort_key(self) -> tuple:
        return (-self.weighted_score, self.priority, self.result.title, self.result.id)


class Ranker:
    """Stateless scorer; per-generation state lives in RankedResults."""

    def __init__(self, config: Optional[RankingConfig] = None):
        self.config = config or RankingConfig()

    def score(self, result: Result) -> RankedResult:
        category = result.category
        return RankedResult(
            result=result,
            weighted_score=result.relevance_score * self.config.weight(category),
            priority=self.config.priority(category),
        )

    def accumulator(self) -> "RankedResults":
        """Fresh accumulated set for one query generation."""
        return RankedResults(self)

    def rank(self, results: Iterable[Result]) -> list[Result]:
        """One-shot dedup and ordering of a complete result set."""
        acc = self.accumulator()
        acc.add(results)
        return acc.ordered()


class RankedResults:
    """
    Accumulated, deduplicated result set for a single generation.

    Candidates are kept per source so a provider that fails midway can be
    withdrawn without losing another provider's copy of a shared key.
    Not thread-safe: the aggregator's run loop is its only writer.
    """

    def __init__(self, ranker: Ranker):
        self._ranker = ranker
        self._sources: dict[str, dict[tuple[str, str], RankedResult]] = {}
        self._winners: dict[tuple[str, str], RankedResult] = {}
        self._ordered: list[RankedResult] = []

    def add(self, batch: Iterable[Result], source: str = "") -> list[Result]:
        """Merge a batch and return the re-sorted accumulated list."""
        candidates = self._sources.setdefault(source, {})
        changed = False
        for result in batch:
            ranked = self._ranker.score(result)
            key = result.dedup_key
            # Higher score wins; equal scores fall back to the sort key so the
            # survivor does not depend on arrival order.
            if key not in candidates or ranked.sort_key < candidates[key].sort_key:
                candidates[key] = ranked
            winner = self._winners.get(key)
            if winner is None or ranked.sort_key < winner.sort_key:
                self._winners[key] = ranked
                changed = True

        if changed:
            self._resort()
        return self.ordered()

    def discard(self, source: str) -> list[Result]:
        """Withdraw everything ``source`` contributed and return the new ordering."""
        removed = self._sources.pop(source, {})
        for key in removed:
            remaining = [c[key] for c in self._sources.values() if key in c]
            if remaining:
                self._winners[key] = min(remaining, key=lambda r: r.sort_key)
            else:
                del self._winners[key]

        if removed:
            self._resort()
        return self.ordered()

    def _resort(self) -> None:
        self._ordered = sorted(self._winners.values(), key=lambda r: r.sort_key)

    def ordered(self) -> list[Result]:
        limit = self._ranker.config.max_results
        ranked = self._ordered if limit is None else self._ordered[:limit]
        return [r.result for r in ranked]

    def ranked(self) -> list[RankedResult]:
        return list(self._ordered)

    def __len__(self) -> int:
        return len(self._winners)
