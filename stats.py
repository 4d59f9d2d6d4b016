"""
stats.py
Aggregates computed from visit rows on every read (nothing here is stored).
"""

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from config import TOP_CAFES_LIMIT, TOP_CAFES_MIN_VISITS
from schemas import (
    AreaStat,
    CafeAggregates,
    CafeOut,
    CafeWithStats,
    LeaderboardEntry,
    Overview,
    Recommendation,
    SiteStats,
    TopCafe,
)

RATING_FIELDS = ("vibe_rating", "food_rating", "coffee_rating", "price_rating")

UNKNOWN_AREA = "Unknown"


def round1(value: float) -> float:
    """Round half away from zero to one decimal (2.25 -> 2.3, -2.25 -> -2.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def cafe_aggregates(visits) -> CafeAggregates:
    visits = list(visits)
    if not visits:
        return CafeAggregates()

    averages = {f: _mean([getattr(v, f) for v in visits if getattr(v, f) is not None]) for f in RATING_FIELDS}
    # mean of the per-dimension means, not of every rating
    overall = _mean(list(averages.values()))

    counts = Counter(v.visitor_name for v in visits)

    return CafeAggregates(
        avg_rating=round1(overall),
        avg_vibe=round1(averages["vibe_rating"]),
        avg_food=round1(averages["food_rating"]),
        avg_coffee=round1(averages["coffee_rating"]),
        avg_price=round1(averages["price_rating"]),
        total_visits=len(visits),
        unique_visitors=list(counts),
        visitor_counts=dict(counts),
        last_visit=max(v.visit_date for v in visits),
    )


def with_stats(cafe) -> CafeWithStats:
    base = CafeOut.model_validate(cafe).model_dump()
    return CafeWithStats(**base, **cafe_aggregates(cafe.visits).model_dump())


def recommendations(visits) -> List[Recommendation]:
    return [
        Recommendation(visitor=v.visitor_name, text=v.recommendations)
        for v in visits
        if v.recommendations and v.recommendations.strip()
    ]


def leaderboard(visits) -> List[LeaderboardEntry]:
    totals: Dict[str, int] = {}
    cafes: Dict[str, set] = {}
    for v in visits:
        totals[v.visitor_name] = totals.get(v.visitor_name, 0) + 1
        cafes.setdefault(v.visitor_name, set()).add(v.cafe_id)

    entries = [
        LeaderboardEntry(name=name, total_visits=totals[name], unique_cafes=len(cafes[name]))
        for name in totals
    ]
    # sorted() is stable: ties keep first-seen order
    return sorted(entries, key=lambda e: e.unique_cafes, reverse=True)


def top_cafes(cafes: Iterable, min_visits: int = TOP_CAFES_MIN_VISITS, limit: int = TOP_CAFES_LIMIT) -> List[TopCafe]:
    ranked = []
    for cafe in cafes:
        agg = cafe_aggregates(cafe.visits)
        if agg.total_visits < min_visits:
            continue
        ranked.append(
            TopCafe(
                id=cafe.id,
                name=cafe.name,
                area=cafe.area,
                avg_rating=agg.avg_rating,
                total_visits=agg.total_visits,
            )
        )
    ranked.sort(key=lambda c: c.avg_rating, reverse=True)
    return ranked[:limit]


def area_stats(cafes: Iterable) -> List[AreaStat]:
    buckets: Dict[str, Dict[str, int]] = {}
    for cafe in cafes:
        area = (cafe.area or "").strip() or UNKNOWN_AREA
        bucket = buckets.setdefault(area, {"total": 0, "visited": 0})
        bucket["total"] += 1
        if cafe.visits:
            bucket["visited"] += 1

    out = [
        AreaStat(
            area=area,
            total=b["total"],
            visited=b["visited"],
            remaining=b["total"] - b["visited"],
            percent_complete=round1(100 * b["visited"] / b["total"]),
        )
        for area, b in buckets.items()
    ]
    out.sort(key=lambda a: a.percent_complete, reverse=True)
    return out


def overview(cafes: Iterable) -> Overview:
    cafes = list(cafes)
    total = len(cafes)
    visited = sum(1 for c in cafes if c.visits)
    return Overview(
        total_cafes=total,
        total_visited=visited,
        total_remaining=total - visited,
        percent_complete=round1(100 * visited / total) if total else 0.0,
    )


def site_stats(cafes, visits) -> SiteStats:
    cafes = list(cafes)
    return SiteStats(
        overview=overview(cafes),
        leaderboard=leaderboard(visits),
        top_cafes=top_cafes(cafes),
        area_stats=area_stats(cafes),
    )
