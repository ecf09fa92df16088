"""
Search package - Concurrent aggregation and ranking of provider results.

Every query is fanned out to all registered providers; their streamed
results are merged, weighted and ordered into one list per generation.
"""

from .aggregator import Aggregator, GenerationReport
from .cancellation import CancellationToken
from .models import Action, ActionKind, Category, CustomCategory, Result
from .provider import Provider, ProviderRegistry
from .ranker import Ranker, RankingConfig
from .session import QuerySession, ResultListener

__all__ = [
    "Action",
    "ActionKind",
    "Aggregator",
    "CancellationToken",
    "Category",
    "CustomCategory",
    "GenerationReport",
    "Provider",
    "ProviderRegistry",
    "QuerySession",
    "Ranker",
    "RankingConfig",
    "Result",
    "ResultListener",
]
