import logging
import math

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from geo.bounds import BoundingBox

from .errors import BadRequest
from .serializers import (
    CoordinatorStatsSerializer,
    HighlightCreateSerializer,
    HighlightSerializer,
    RoadSerializer,
)
from .services import services

logger = logging.getLogger(__name__)

BOUNDS_PARAMS = ("swLat", "swLng", "neLat", "neLng")


def bounds_from_query(query_params) -> BoundingBox:
    """
    Parse swLat/swLng/neLat/neLng into a BoundingBox, rejecting early with a 400.
    """
    missing = [name for name in BOUNDS_PARAMS if not query_params.get(name)]
    if missing:
        raise BadRequest(f"Missing required parameters: {', '.join(missing)}")

    try:
        sw_lat, sw_lng, ne_lat, ne_lng = (float(query_params[name]) for name in BOUNDS_PARAMS)
    except ValueError:
        raise BadRequest("Invalid parameters: coordinates must be numbers")

    if not all(math.isfinite(value) for value in (sw_lat, sw_lng, ne_lat, ne_lng)):
        raise BadRequest("Invalid parameters: coordinates must be numbers")

    try:
        return BoundingBox(sw_lat, sw_lng, ne_lat, ne_lng)
    except ValueError as exc:
        raise BadRequest(f"Invalid parameters: {exc}")


class RoadViewSet(viewsets.ViewSet):
    """
    Roads inside a bounding box, served through the cache coordinator.
    - GET /api/roads?swLat&swLng&neLat&neLng
    - GET /api/roads/stats
    """
    services = services

    def list(self, request):
        bounds = bounds_from_query(request.query_params)

        try:
            roads = self.services.road_coordinator().get_roads(bounds)
        except Exception as e:
            logger.exception("Failed to fetch roads for %s", bounds.cache_key())
            return Response(
                {"message": "Failed to fetch roads", "error": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response({"roads": RoadSerializer(roads, many=True).data})

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Cache/coordinator counters. fetchFailures tells an empty area from a degraded upstream.
        """
        return Response(CoordinatorStatsSerializer(self.services.road_coordinator().stats()).data)


class HighlightViewSet(viewsets.ViewSet):
    """
    In-memory road highlights.
    - POST /api/highlights, GET /api/highlights, DELETE /api/highlights/<id>
    """
    services = services
    # let non-numeric ids reach destroy() so they get a 400, not a routing 404
    lookup_value_regex = "[^/]+"

    def list(self, request):
        try:
            highlights = self.services.highlight_store().list()
        except Exception as e:
            logger.exception("Failed to fetch road highlights")
            return Response(
                {"message": "Failed to fetch road highlights", "error": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"highlights": HighlightSerializer(highlights, many=True).data})

    def create(self, request):
        serializer = HighlightCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"message": "Invalid road highlight data", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            highlight = self.services.highlight_store().save(serializer.to_new_highlight())
        except Exception as e:
            logger.exception("Failed to save road highlight")
            return Response(
                {"message": "Failed to save road highlight", "error": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        logger.info("Saved highlight %d for %s", highlight.id, highlight.external_id)
        return Response(HighlightSerializer(highlight).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        try:
            highlight_id = int(pk)
        except (TypeError, ValueError):
            raise BadRequest("Invalid ID parameter")

        try:
            deleted = self.services.highlight_store().delete_by_id(highlight_id)
        except Exception as e:
            logger.exception("Failed to delete road highlight %d", highlight_id)
            return Response(
                {"message": "Failed to delete road highlight", "error": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if not deleted:
            raise NotFound("Road highlight not found")

        return Response({"success": True})
