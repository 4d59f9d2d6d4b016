"""
search.py
Autocomplete suggestions for the "add a visit" café picker.
"""

from typing import Iterable, List

from fuzzywuzzy import fuzz

from config import SEARCH_LIMIT, SEARCH_THRESHOLD

SEARCH_FIELDS = ("name", "area", "postcode")


def field_score(query: str, value: str) -> int:
    """How well `value` matches `query` (0-100).

    partial_ratio only looks for the query inside the field. A field shorter
    than the query is compared whole, so a short name buried in a long query
    does not count as a match.
    """
    value = value.lower()
    if len(value) >= len(query):
        return fuzz.partial_ratio(query, value)
    return fuzz.ratio(query, value)


def match_score(query: str, cafe) -> int:
    """Best score of the query against name, area or postcode."""
    best = 0
    for field in SEARCH_FIELDS:
        value = getattr(cafe, field, None)
        if not value:
            continue
        best = max(best, field_score(query, value))
    return best


def suggest(query: str, cafes: Iterable, limit: int = SEARCH_LIMIT, threshold: int = SEARCH_THRESHOLD) -> List:
    """Cafés approximately matching `query`, best first, at most `limit`.

    An empty query gives no suggestions rather than every café.
    """
    q = (query or "").strip().lower()
    if not q:
        return []

    scored = []
    for cafe in cafes:
        score = match_score(q, cafe)
        if score >= threshold:
            scored.append((score, cafe))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [cafe for _, cafe in scored[:limit]]
