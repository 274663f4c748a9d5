import os
from typing import List, Optional

import django
import pytest

# no network at import time: the master cache is never preloaded in tests
os.environ["ROADS_PRELOAD_MASTER_CACHE"] = "false"
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.roadmap_backend.settings")
django.setup()

from geo.bounds import BoundingBox
from roads.models import Road, RoadCategory


class MockOverpass:
    """
    Stands in for OverpassClient. Records every fetch and returns canned roads.
    """
    def __init__(self, roads: Optional[List[Road]] = None, error: Optional[Exception] = None):
        self.roads = list(roads or [])
        self.error = error
        self.calls = []

    def fetch_roads(self, box, major_roads_only=False, *, anchor=None, anchor_radius_m=1000):
        self.calls.append({"box": box, "major_roads_only": major_roads_only, "anchor": anchor})
        if self.error is not None:
            raise self.error
        return list(self.roads)


@pytest.fixture
def wandsworth_box():
    # small viewport around Wandsworth Town
    return BoundingBox(51.45, -0.20, 51.46, -0.19)


@pytest.fixture
def garratt_lane():
    return Road.new(
        way_id=4255001,
        coordinates=[(51.455, -0.195), (51.457, -0.193)],
        category=RoadCategory.SECONDARY,
        name="Garratt Lane",
    )


@pytest.fixture
def battersea_park_road():
    # well outside the Wandsworth Town viewport
    return Road.new(
        way_id=4255002,
        coordinates=[(51.4770, -0.1550), (51.4775, -0.1500), (51.4781, -0.1462)],
        category=RoadCategory.PRIMARY,
        name="Battersea Park Road",
    )


@pytest.fixture
def mock_overpass(garratt_lane):
    return MockOverpass(roads=[garratt_lane])
