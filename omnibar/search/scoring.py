"""
Relevance helper shared by the built-in providers.

Tiers, highest first:
  - exact match (case-insensitive): 1.0
  - prefix match: 0.9
  - whole-word match: 0.8
  - substring match: 0.7
  - otherwise: fuzzy similarity scaled into [0.0, 0.5]
"""

from rapidfuzz import fuzz

EXACT = 1.0
PREFIX = 0.9
WORD = 0.8
SUBSTRING = 0.7
FUZZY_CEILING = 0.5


def relevance(text: str, query: str) -> float:
    """Score how well ``text`` answers ``query`` on a 0.0-1.0 scale."""
    t = text.strip().lower()
    q = query.strip().lower()
    if not t or not q:
        return 0.0

    if t == q:
        return EXACT
    if t.startswith(q):
        return PREFIX
    if q in t.split():
        return WORD
    if q in t:
        return SUBSTRING

    # Typo-tolerant fallback, never outranks a literal match
    return round(fuzz.WRatio(t, q) / 100 * FUZZY_CEILING, 4)
