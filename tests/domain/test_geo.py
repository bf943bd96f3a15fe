"""Tests for distance and travel time helpers."""

import math

import pytest

from dispatch.domain.geo import distance_km, estimate_travel_minutes


def test_distance_between_identical_points_is_zero() -> None:
    assert distance_km(-33.9249, 18.4241, -33.9249, 18.4241) == 0


def test_one_degree_of_latitude_is_about_111_km() -> None:
    assert distance_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)


def test_distance_is_symmetric() -> None:
    there = distance_km(-33.9249, 18.4241, -33.9321, 18.8602)
    back = distance_km(-33.9321, 18.8602, -33.9249, 18.4241)
    assert there == pytest.approx(back)


@pytest.mark.parametrize(
    ("distance", "speed", "expected"),
    [
        (61.0, 60.0, 61),
        (60.0, 60.0, 60),
        (0.5, 60.0, 1),
        (0.0, 60.0, 0),
        (90.0, 120.0, 45),
    ],
)
def test_estimate_travel_minutes_rounds_up(distance, speed, expected) -> None:
    assert estimate_travel_minutes(distance, speed) == expected


def test_estimate_matches_ceiling_of_hours() -> None:
    distance = distance_km(-33.9249, 18.4241, -33.9321, 18.8602)
    assert estimate_travel_minutes(distance) == math.ceil(distance * 60 / 60)


@pytest.mark.parametrize("speed", [0, -10])
def test_estimate_requires_positive_speed(speed) -> None:
    with pytest.raises(ValueError):
        estimate_travel_minutes(10.0, speed)
