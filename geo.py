"""
geo.py
Great-circle distances and nearest-café ranking.
"""

from math import asin, cos, radians, sin, sqrt
from typing import Iterable, List, Tuple

from config import EARTH_RADIUS_KM, NEAREST_LIMIT


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometers between two (lat, lng) points in degrees."""
    phi1, phi2 = radians(lat1), radians(lat2)
    dphi = radians(lat2 - lat1)
    dlmb = radians(lng2 - lng1)

    a = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlmb / 2) ** 2
    # float error can push a a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * asin(sqrt(min(1.0, a)))


def has_coordinates(cafe) -> bool:
    return cafe.latitude is not None and cafe.longitude is not None


def nearest(lat: float, lng: float, cafes: Iterable, limit: int = NEAREST_LIMIT) -> List[Tuple[object, float]]:
    """Return up to `limit` (cafe, distance_km) pairs, closest first.

    Cafés without coordinates are skipped. Equal distances keep input order.
    """
    if limit <= 0:
        return []

    ranked = [
        (cafe, haversine_km(lat, lng, cafe.latitude, cafe.longitude))
        for cafe in cafes
        if has_coordinates(cafe)
    ]
    ranked.sort(key=lambda pair: pair[1])
    return ranked[:limit]
