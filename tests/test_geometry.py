import math
import random

import pytest

from geo.geometry import EARTH_RADIUS_KM, distance_km, path_length_km


@pytest.fixture
def wandsworth_path():
    # Wandsworth Bridge Road, roughly north to south
    return [
        (51.4735, -0.1885),
        (51.4700, -0.1875),
        (51.4662, -0.1872),
        (51.4621, -0.1880),
    ]


def test_distance_is_zero_for_identical_points():
    assert distance_km(51.4571, -0.1927, 51.4571, -0.1927) == 0.0


def test_distance_is_symmetric():
    rng = random.Random(7)
    for _ in range(200):
        lat1, lat2 = rng.uniform(-89, 89), rng.uniform(-89, 89)
        lon1, lon2 = rng.uniform(-179, 179), rng.uniform(-179, 179)
        assert distance_km(lat1, lon1, lat2, lon2) == distance_km(lat2, lon2, lat1, lon1)


def test_distance_matches_known_values():
    # one degree of latitude on a 6371km sphere
    assert distance_km(0, 0, 1, 0) == pytest.approx(EARTH_RADIUS_KM * math.pi / 180)
    # London -> Paris is ~344km
    assert distance_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, abs=1.0)


def test_path_length_of_short_paths_is_zero():
    assert path_length_km([]) == 0.0
    assert path_length_km([(51.45, -0.19)]) == 0.0


def test_path_length_equals_sum_of_hops(wandsworth_path):
    expected = sum(
        distance_km(lat1, lon1, lat2, lon2)
        for (lat1, lon1), (lat2, lon2) in zip(wandsworth_path, wandsworth_path[1:])
    )
    assert path_length_km(wandsworth_path) == pytest.approx(expected)
    # about 1.3km end to end
    assert 1.0 < path_length_km(wandsworth_path) < 1.6


def test_path_length_is_invariant_under_reversal(wandsworth_path):
    assert path_length_km(list(reversed(wandsworth_path))) == pytest.approx(path_length_km(wandsworth_path))
