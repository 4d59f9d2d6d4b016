"""
views.py
List and map view state. A view is a frozen value: changing a filter builds
a new view, and applying it recomputes the visible list from the fetched
cafés every time.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

from geo import has_coordinates
from schemas import CafeWithStats, MapMarker

SORT_KEYS = ("rating", "visits", "date", "name")
MAP_SEARCH_FIELDS = ("name", "area", "postcode")
WEBSITE_FILTERS = ("all", "with", "without")


@dataclass(frozen=True)
class CafeListView:
    search: str = ""
    area: Optional[str] = None
    sort_by: Optional[str] = None
    visited_only: bool = False
    unvisited_only: bool = False
    website: str = "all"
    # the map page also searches area and postcode
    search_fields: Tuple[str, ...] = ("name",)

    def __post_init__(self):
        if self.sort_by is not None and self.sort_by not in SORT_KEYS:
            raise ValueError(f"sort must be one of {', '.join(SORT_KEYS)}")
        if self.website not in WEBSITE_FILTERS:
            raise ValueError(f"website must be one of {', '.join(WEBSITE_FILTERS)}")

    def with_changes(self, **changes) -> "CafeListView":
        return replace(self, **changes)

    def apply(self, cafes: Iterable[CafeWithStats]) -> List[CafeWithStats]:
        out = list(cafes)

        if self.visited_only:
            out = [c for c in out if c.total_visits > 0]
        if self.unvisited_only:
            out = [c for c in out if c.total_visits == 0]

        needle = self.search.strip().lower()
        if needle:
            out = [c for c in out if self._matches(needle, c)]

        if self.area:
            out = [c for c in out if c.area == self.area]

        if self.website == "with":
            out = [c for c in out if c.website]
        elif self.website == "without":
            out = [c for c in out if not c.website]

        return self._sorted(out)

    def _matches(self, needle: str, cafe) -> bool:
        return any(needle in (getattr(cafe, f, None) or "").lower() for f in self.search_fields)

    def _sorted(self, cafes: List[CafeWithStats]) -> List[CafeWithStats]:
        if self.sort_by == "rating":
            return sorted(cafes, key=lambda c: c.avg_rating, reverse=True)
        if self.sort_by == "visits":
            return sorted(cafes, key=lambda c: c.total_visits, reverse=True)
        if self.sort_by == "date":
            # never-visited cafés go last
            dated = sorted((c for c in cafes if c.last_visit), key=lambda c: c.last_visit, reverse=True)
            return dated + [c for c in cafes if not c.last_visit]
        if self.sort_by == "name":
            return sorted(cafes, key=lambda c: c.name.lower())
        return cafes


def areas(cafes: Iterable) -> List[str]:
    return sorted({c.area for c in cafes if c.area})


def marker_color(avg_rating: float) -> str:
    if avg_rating == 0:
        return "#9ca3af"  # not visited yet
    if avg_rating < 2.5:
        return "#ef4444"
    if avg_rating < 3.5:
        return "#f59e0b"
    if avg_rating < 4.5:
        return "#eab308"
    return "#22c55e"


def visitor_badge(unique_visitors: Iterable[str]) -> str:
    return "".join(name[0] for name in unique_visitors if name)


def map_markers(cafes: Iterable[CafeWithStats]) -> List[MapMarker]:
    return [
        MapMarker(
            id=c.id,
            name=c.name,
            latitude=c.latitude,
            longitude=c.longitude,
            color=marker_color(c.avg_rating),
            badge=visitor_badge(c.unique_visitors),
        )
        for c in cafes
        if has_coordinates(c)
    ]
