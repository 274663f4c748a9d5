import json
import os
import sys
import time

import numpy as np
import pandas as pd

from geo.bounds import BoundingBox
from overpass.client import OverpassClient
from roads.classification import classify
from roads.coordinator import RoadCoordinator
from roads.models import Road
from roads.scheduler import ManualScheduler
from roads.viewport import ViewportSession

HIGHWAY_MIX = ["primary", "secondary", "tertiary", "residential", "residential", "service", "footway"]


class SyntheticOverpass:
    """
    Offline stand-in for OverpassClient: a fixed street grid, one east-west road
    every 0.002 degrees of latitude, clipped to whatever box is asked for.
    """
    def __init__(self, latency_s=0.0):
        self.latency_s = latency_s
        self.calls = 0

    def fetch_roads(self, box, major_roads_only=False, *, anchor=None, anchor_radius_m=1000):
        self.calls += 1
        if self.latency_s:
            time.sleep(self.latency_s)

        roads = []
        for lat in np.arange(np.ceil(box.south_lat / 0.002) * 0.002, box.north_lat, 0.002):
            way_id = int(round(lat * 1000))
            highway = HIGHWAY_MIX[way_id % len(HIGHWAY_MIX)]
            if major_roads_only and highway not in ("primary", "secondary", "tertiary"):
                continue
            roads.append(Road.new(
                way_id=way_id,
                coordinates=[(float(lat), box.west_lng), (float(lat), box.east_lng)],
                category=classify(highway),
                name=f"Grid Road {way_id}",
            ))
        return roads


def load_trace(filepath="viewport_trace.csv") -> pd.DataFrame:
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return pd.read_csv(os.path.join(base_dir, filepath)).sort_values("t_s")


def run_simulation(live=False):
    print("=== STARTING VIEWPORT THROTTLE SIMULATION ===")

    # 1. Load Data
    trace = load_trace()
    print(f"Loaded {len(trace)} viewport events spanning {trace['t_s'].iloc[-1]:.1f}s.\n")

    # 2. Configure System
    fetcher = OverpassClient() if live else SyntheticOverpass()
    coordinator = RoadCoordinator(fetcher)
    scheduler = ManualScheduler()

    results = []

    def on_roads(box, roads):
        results.append({
            "t_s": round(scheduler.now(), 3),
            "query_key": box.cache_key(),
            "roads": len(roads),
            "km": round(sum(road.length_km for road in roads), 3),
        })
        print(f"[QUERY] t={scheduler.now():7.2f}s -> {len(roads)} roads for {box.cache_key()}")

    session = ViewportSession(coordinator, scheduler, on_roads=on_roads)

    # 3. Replay the trace on the virtual clock
    start_time = time.time()
    for row in trace.itertuples(index=False):
        scheduler.advance(max(0.0, row.t_s - scheduler.now()))
        session.move(BoundingBox(row.sw_lat, row.sw_lng, row.ne_lat, row.ne_lng))

    # let the last debounce and rate-limit windows drain
    scheduler.advance(session.throttle.policy.window_s * 2)
    session.close()
    elapsed = time.time() - start_time

    # 4. Report
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    output_path = os.path.join(base_dir, "viewport_results.csv")
    pd.DataFrame(results, columns=["t_s", "query_key", "roads", "km"]).to_csv(output_path, index=False)

    roads_path = os.path.join(base_dir, "viewport_roads.json")
    with open(roads_path, "w") as file:
        json.dump([road.to_dict() for road in session.roads], file, indent=2)

    stats = coordinator.stats()
    throttle = session.throttle
    print("\n=== SIMULATION COMPLETE ===")
    print(f"Viewport events: {len(trace)}")
    print(f"Throttle: {throttle.applied_count} applied, {throttle.skipped_count} skipped as contained")
    print(
        f"Coordinator: {stats.exact_hits} exact, {stats.containment_hits} containment, "
        f"{stats.master_hits} master, {stats.fetches} fetches ({stats.fetch_failures} failed)"
    )
    print(f"Cache entries: {stats.cache_entries} (evicted {stats.evictions})")
    print(f"Replayed in {elapsed:.2f}s wall time.")
    print(f"Results written to '{output_path}', final roads to '{roads_path}'.")


if __name__ == "__main__":
    run_simulation(live="--live" in sys.argv)
