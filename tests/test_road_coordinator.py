import threading
import time

import pytest

from conftest import MockOverpass
from geo.bounds import BoundingBox
from overpass.client import OverpassClient
from overpass.errors import UpstreamError
from roads.cache import RoadCache
from roads.coordinator import RoadCoordinator
from roads.policy import RoadCachePolicy

# three viewports far enough apart that none covers another
TOOTING = BoundingBox(51.43, -0.17, 51.44, -0.16)
PUTNEY = BoundingBox(51.46, -0.23, 51.47, -0.22)
BATTERSEA = BoundingBox(51.47, -0.17, 51.48, -0.16)


def test_repeat_request_is_served_from_cache(mock_overpass, wandsworth_box):
    """
    Two identical requests: the fetcher runs once and both calls see the same roads.
    """
    coordinator = RoadCoordinator(mock_overpass)

    first = coordinator.get_roads(wandsworth_box)
    second = coordinator.get_roads(wandsworth_box)

    assert len(mock_overpass.calls) == 1
    assert second == first
    assert all(a is b for a, b in zip(first, second))
    assert coordinator.stats().exact_hits == 1


def test_near_identical_boxes_share_a_key(mock_overpass, wandsworth_box):
    coordinator = RoadCoordinator(mock_overpass)

    coordinator.get_roads(wandsworth_box)
    coordinator.get_roads(BoundingBox(51.450003, -0.200004, 51.460002, -0.189996))

    assert len(mock_overpass.calls) == 1


def test_sub_box_is_served_by_containing_entry(mock_overpass):
    coordinator = RoadCoordinator(mock_overpass)
    wide = BoundingBox(51.44, -0.21, 51.47, -0.18)
    inside = BoundingBox(51.45, -0.20, 51.46, -0.19)

    wide_roads = coordinator.get_roads(wide)
    inside_roads = coordinator.get_roads(inside)

    assert len(mock_overpass.calls) == 1
    assert inside_roads == wide_roads
    stats = coordinator.stats()
    assert stats.containment_hits == 1
    # containment hits are not memoized under the new key
    assert stats.cache_entries == 1


def test_master_cache_filters_to_requested_box(garratt_lane, battersea_park_road, wandsworth_box):
    """
    Master cache holds Garratt Lane (inside the box) and Battersea Park Road (outside).
    The request is answered from the master cache and memoized under its exact key.
    """
    overpass = MockOverpass(roads=[garratt_lane, battersea_park_road])
    coordinator = RoadCoordinator(overpass)

    # 1. Populate the master cache once
    assert coordinator.load_master_cache() == 2
    assert coordinator.has_master_cache

    # 2. Resolve the viewport
    roads = coordinator.get_roads(wandsworth_box)

    assert roads == [garratt_lane]
    assert len(overpass.calls) == 1  # only the master load hit the network
    assert len(coordinator.cache) == 1
    entry = coordinator.cache.get(wandsworth_box.cache_key())
    assert entry.roads == (garratt_lane,)
    assert coordinator.stats().master_hits == 1


def test_fetch_failure_degrades_to_empty_and_is_counted(wandsworth_box):
    overpass = MockOverpass(error=UpstreamError("Gateway Timeout", status=504))
    coordinator = RoadCoordinator(overpass)

    assert coordinator.get_roads(wandsworth_box) == []
    assert len(coordinator.cache) == 0

    # nothing was cached, so the next request tries again
    assert coordinator.get_roads(wandsworth_box) == []
    assert len(overpass.calls) == 2

    stats = coordinator.stats()
    assert stats.fetches == 2
    assert stats.fetch_failures == 2


def test_unexpected_fetcher_error_also_degrades(wandsworth_box):
    coordinator = RoadCoordinator(MockOverpass(error=RuntimeError("parser blew up")))

    assert coordinator.get_roads(wandsworth_box) == []
    assert coordinator.stats().fetch_failures == 1


def test_failed_master_load_leaves_master_unset():
    coordinator = RoadCoordinator(MockOverpass(error=UpstreamError("Service Unavailable", status=503)))

    assert coordinator.load_master_cache() == 0
    assert not coordinator.has_master_cache
    assert coordinator.stats().fetch_failures == 1


def test_query_box_is_widened_and_major_roads_chosen_by_span(mock_overpass):
    coordinator = RoadCoordinator(mock_overpass)

    # 1. First load: cache empty, so only major roads
    coordinator.get_roads(TOOTING)
    # 2. Small viewport with a warm cache: all roads
    coordinator.get_roads(PUTNEY)
    # 3. Zoomed out: span above 0.05 degrees, major roads again
    coordinator.get_roads(BoundingBox(51.30, -0.40, 51.40, -0.30))

    assert [call["major_roads_only"] for call in mock_overpass.calls] == [True, False, True]

    query_box = mock_overpass.calls[1]["box"]
    assert query_box.south_lat == pytest.approx(PUTNEY.south_lat - 0.01)
    assert query_box.west_lng == pytest.approx(PUTNEY.west_lng - 0.01)
    assert query_box.north_lat == pytest.approx(PUTNEY.north_lat + 0.01)
    assert query_box.east_lng == pytest.approx(PUTNEY.east_lng + 0.01)
    assert mock_overpass.calls[1]["anchor"] == (51.4571, -0.1927)


def test_least_recently_used_entry_is_evicted(mock_overpass):
    coordinator = RoadCoordinator(mock_overpass, cache=RoadCache(max_entries=2))

    coordinator.get_roads(TOOTING)
    coordinator.get_roads(PUTNEY)
    coordinator.get_roads(TOOTING)  # touch, Putney is now the oldest
    coordinator.get_roads(BATTERSEA)

    assert coordinator.cache.keys() == [TOOTING.cache_key(), BATTERSEA.cache_key()]
    assert coordinator.stats().evictions == 1


def test_concurrent_requests_for_one_key_share_a_fetch(garratt_lane, wandsworth_box):
    started = threading.Event()
    release = threading.Event()

    class SlowOverpass(MockOverpass):
        def fetch_roads(self, box, major_roads_only=False, *, anchor=None, anchor_radius_m=1000):
            started.set()
            release.wait(timeout=5)
            return super().fetch_roads(box, major_roads_only, anchor=anchor)

    overpass = SlowOverpass(roads=[garratt_lane])
    coordinator = RoadCoordinator(overpass)
    results = []

    def request():
        results.append(coordinator.get_roads(wandsworth_box))

    leader = threading.Thread(target=request)
    leader.start()
    assert started.wait(timeout=5)

    follower = threading.Thread(target=request)
    follower.start()

    # wait until the follower has joined the in-flight fetch
    deadline = time.monotonic() + 5
    while coordinator.stats().coalesced == 0 and time.monotonic() < deadline:
        time.sleep(0.01)

    release.set()
    leader.join(timeout=5)
    follower.join(timeout=5)

    assert len(overpass.calls) == 1
    assert results == [[garratt_lane], [garratt_lane]]
    assert coordinator.stats().coalesced == 1


def test_cache_policy_validation():
    with pytest.raises(ValueError):
        RoadCachePolicy(max_entries=0).validate()
    with pytest.raises(ValueError):
        RoadCachePolicy(major_roads_span_deg=0).validate()


class RemarkSession:
    """requests.Session stand-in that always answers 200 with an Overpass runtime error remark."""

    class Response:
        status_code = 200
        ok = True
        reason = "OK"
        text = ""

        def json(self):
            return {"elements": [], "remark": "runtime error: Query timed out in \"query\" at line 3 after 26 seconds."}

    def __init__(self):
        self.posts = 0

    def post(self, url, data=None, headers=None, timeout=None):
        self.posts += 1
        return self.Response()


def test_runtime_error_remark_counts_as_failure_and_is_not_cached(wandsworth_box):
    """
    A 200 reply carrying a runtime error is a degraded upstream, not an empty area.
    """
    session = RemarkSession()
    coordinator = RoadCoordinator(OverpassClient(base_url="https://overpass.test/api/interpreter", session=session))

    assert coordinator.get_roads(wandsworth_box) == []
    assert coordinator.get_roads(wandsworth_box) == []

    stats = coordinator.stats()
    assert stats.fetch_failures == 2
    assert stats.cache_entries == 0
    assert session.posts == 2
