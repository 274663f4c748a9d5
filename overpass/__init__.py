#Marks overpass as a package.
#Re-exports the public API (OverpassClient, UpstreamError, build_highway_query)
#so other modules import from overpass without knowing internal file names.
#No business logic.

from .errors import UpstreamError
from .query import build_highway_query
from .client import OverpassClient, parse_elements

__all__ = [
    "UpstreamError",
    "build_highway_query",
    "OverpassClient",
    "parse_elements",
]
