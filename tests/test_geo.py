"""
Unit tests for haversine distance and nearest-café ranking.
"""

from types import SimpleNamespace

import pytest

from geo import haversine_km, nearest

BRISTOL = (51.4545, -2.5879)
BATH = (51.3811, -2.3590)


def spot(name, lat=None, lng=None):
    return SimpleNamespace(name=name, latitude=lat, longitude=lng)


def test_distance_to_self_is_zero():
    assert haversine_km(*BRISTOL, *BRISTOL) == 0.0


def test_distance_is_symmetric():
    assert haversine_km(*BRISTOL, *BATH) == pytest.approx(haversine_km(*BATH, *BRISTOL))


def test_bristol_to_bath():
    # roughly 18 km as the crow flies
    assert haversine_km(*BRISTOL, *BATH) == pytest.approx(17.8, abs=0.5)


def test_antipodes_do_not_error():
    assert haversine_km(0, 0, 0, 180) == pytest.approx(3.141592653589793 * 6371.0)


def test_nearest_same_point_is_zero():
    cafes = [spot("Centre", *BRISTOL)]
    (cafe, distance), = nearest(*BRISTOL, cafes)
    assert cafe.name == "Centre"
    assert distance == 0.0


def test_nearest_sorted_and_skips_missing_coordinates():
    cafes = [
        spot("Bath", *BATH),
        spot("Nowhere"),
        spot("Half", lat=51.45),
        spot("Centre", *BRISTOL),
        spot("Harbourside", 51.4480, -2.5980),
    ]
    ranked = nearest(*BRISTOL, cafes)

    assert [c.name for c, _ in ranked] == ["Centre", "Harbourside", "Bath"]
    distances = [d for _, d in ranked]
    assert distances == sorted(distances)


def test_nearest_length_is_min_of_limit_and_available():
    cafes = [spot(f"c{i}", 51.0 + i / 100, -2.5) for i in range(15)]
    assert len(nearest(*BRISTOL, cafes)) == 10
    assert len(nearest(*BRISTOL, cafes, limit=3)) == 3
    assert len(nearest(*BRISTOL, cafes[:4])) == 4
    assert nearest(*BRISTOL, cafes, limit=0) == []


def test_nearest_ties_keep_input_order():
    cafes = [spot("first", *BATH), spot("second", *BATH)]
    assert [c.name for c, _ in nearest(*BRISTOL, cafes)] == ["first", "second"]
