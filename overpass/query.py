#Purpose: Overpass QL query construction.
#Builds the text of a highway query for a bounding box:
#all named highways, or only major categories when zoomed out / first load
#optional "always include" arterial clause around an anchor point
#Keeps query syntax out of the HTTP client.

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from geo.bounds import BoundingBox
from roads.classification import ARTERIAL_HIGHWAY_TYPES, MAJOR_HIGHWAY_TYPES

LatLon = Tuple[float, float]


def _highway_regex(highway_types: Sequence[str]) -> str:
    return f'[highway~"^({"|".join(highway_types)})$"]'


def format_bbox(box: BoundingBox) -> str:
    """Overpass wants bbox as south,west,north,east."""
    return f"{box.south_lat},{box.west_lng},{box.north_lat},{box.east_lng}"


def build_highway_query(
    box: BoundingBox,
    major_roads_only: bool = False,
    *,
    anchor: Optional[LatLon] = None,
    anchor_radius_m: int = 1000,
    timeout_s: Optional[int] = None,
) -> str:
    """
    Overpass QL selecting named highway ways inside `box`, plus their nodes.

    Output order is `out body; >; out skel qt;` so the response carries the ways
    followed by a skeleton of every referenced node (id, lat, lon).
    """
    settings = "[out:json]"
    if timeout_s:
        settings += f"[timeout:{int(timeout_s)}]"

    if major_roads_only:
        selector = f"way{_highway_regex(MAJOR_HIGHWAY_TYPES)}[name]({format_bbox(box)});"
    else:
        selector = f"way[highway][name]({format_bbox(box)});"

    clauses = [selector]
    if anchor is not None:
        lat, lng = anchor
        clauses.append(
            f"way{_highway_regex(ARTERIAL_HIGHWAY_TYPES)}(around:{int(anchor_radius_m)},{lat},{lng});"
        )

    body = "\n  ".join(clauses)
    return f"{settings};\n(\n  {body}\n);\nout body;\n>;\nout skel qt;\n"
