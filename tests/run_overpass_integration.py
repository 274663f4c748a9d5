from geo.bounds import BOROUGH_CENTER, BoundingBox
from overpass.client import OverpassClient
from overpass.errors import UpstreamError
from roads.coordinator import RoadCoordinator


def main():
    overpass = OverpassClient(timeout=30)
    coordinator = RoadCoordinator(overpass)

    # Wandsworth Town, then a viewport nudged inside it
    town = BoundingBox(51.450, -0.200, 51.460, -0.185)
    nudged = BoundingBox(51.452, -0.198, 51.458, -0.188)

    try:
        raw = overpass.fetch_roads(town, anchor=BOROUGH_CENTER)
    except UpstreamError as e:
        print(f"Overpass unavailable: {e}")
        return

    print(f"\nDirect fetch returned {len(raw)} roads:\n")
    for road in sorted(raw, key=lambda r: r.length_km, reverse=True)[:15]:
        print(f"{road.external_id:>14} | {road.category.value:<11} | {road.length_km:6.3f} km | {road.name}")

    first = coordinator.get_roads(town)
    second = coordinator.get_roads(nudged)

    stats = coordinator.stats()
    print(
        f"\nCoordinator: {len(first)} roads, then {len(second)} roads for the nudged view | "
        f"fetches {stats.fetches}, containment hits {stats.containment_hits}, "
        f"failures {stats.fetch_failures}"
    )


if __name__ == "__main__":
    main()
