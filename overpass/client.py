#Purpose: The Overpass "adapter/client".
#Sole responsibility: talk to the Overpass API via HTTP and return normalized roads.
#Encapsulates Overpass-specific details:
#query submission (form-encoded `data=` body)
#timeouts/error handling (UpstreamError)
#parsing the node/way element list into Road objects
#It should not contain caching or throttling rules.

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import requests
from dotenv import load_dotenv

from geo.bounds import BoundingBox
from roads.classification import classify
from roads.models import Road

from .errors import UpstreamError
from .query import build_highway_query

# Read Overpass settings from environment
# Example in .env:
# OVERPASS_URL=https://overpass-api.de/api/interpreter
load_dotenv()
OVERPASS_URL = os.getenv("OVERPASS_URL", "https://overpass-api.de/api/interpreter")
OVERPASS_TIMEOUT_S = float(os.getenv("OVERPASS_TIMEOUT_S", "15"))

logger = logging.getLogger(__name__)

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]


def parse_elements(payload: Dict[str, Any]) -> List[Road]:
    """
    Turn an Overpass JSON payload into Road objects.

    - first pass: node id -> (lat, lon)
    - second pass: every way with a highway tag, coordinates resolved in node order
    - node refs missing from the table are skipped; a way with none left is dropped
    """
    elements = payload.get("elements") or []

    nodes: Dict[int, LatLon] = {}
    for element in elements:
        if element.get("type") == "node" and "lat" in element and "lon" in element:
            nodes[element["id"]] = (float(element["lat"]), float(element["lon"]))

    roads: List[Road] = []
    for element in elements:
        if element.get("type") != "way":
            continue
        tags = element.get("tags") or {}
        highway = tags.get("highway")
        if not highway:
            continue

        coordinates = [nodes[node_id] for node_id in element.get("nodes", []) if node_id in nodes]
        if not coordinates:
            continue

        roads.append(
            Road.new(
                way_id=element["id"],
                coordinates=coordinates,
                category=classify(highway),
                name=tags.get("name"),
            )
        )
    return roads


class OverpassClient:
    """
    Overpass Adapter / Client

    Sole responsibility:
    - POST highway queries to the Overpass interpreter
    - Bound every call with a timeout
    - Return normalized Road lists or raise UpstreamError

    """
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = OVERPASS_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or OVERPASS_URL
        self.timeout = timeout #seconds to wait for Overpass before giving up
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("Overpass URL not set. Please set OVERPASS_URL in the .env file.")

    def fetch_roads(
        self,
        box: BoundingBox,
        major_roads_only: bool = False,
        *,
        anchor: Optional[LatLon] = None,
        anchor_radius_m: int = 1000,
    ) -> List[Road]:
        """
        Fetch named roads inside `box`.

        Returns an empty list when the area has no roads; raises UpstreamError
        when the service cannot give us an answer.
        """
        query = build_highway_query(
            box,
            major_roads_only,
            anchor=anchor,
            anchor_radius_m=anchor_radius_m,
        )
        payload = self.run_query(query)
        roads = parse_elements(payload)
        logger.info(
            "[OVERPASS] %d roads for %s (%s)",
            len(roads),
            box.cache_key(),
            "major roads only" if major_roads_only else "all roads",
        )
        return roads

    def run_query(self, query: str) -> Dict[str, Any]:
        """
        Submit raw Overpass QL and return the decoded JSON body.
        """
        try:
            response = self.session.post(
                self.base_url,
                data={"data": query}, # requests form-encodes this
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise UpstreamError(f"Overpass request timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"Overpass request failed: {exc}") from exc

        if not response.ok:
            raise UpstreamError(response.reason or response.text[:200], status=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError("Overpass returned a body that is not JSON", status=response.status_code) from exc

        if not isinstance(body, dict):
            raise UpstreamError("Overpass returned an unexpected body", status=response.status_code)

        # server-side timeouts and memory limits come back as 200 with a remark
        remark = body.get("remark") or ""
        if isinstance(remark, str) and remark.startswith("runtime error"):
            raise UpstreamError(remark, status=response.status_code)

        return body
