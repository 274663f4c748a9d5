from rest_framework import serializers

from highlights.models import NewHighlight
from roads.models import RoadCategory


class CoordinateField(serializers.ListField):
    """A [lat, lng] pair."""

    def __init__(self, **kwargs):
        kwargs.setdefault("child", serializers.FloatField())
        kwargs.setdefault("min_length", 2)
        kwargs.setdefault("max_length", 2)
        super().__init__(**kwargs)


class RoadSerializer(serializers.Serializer):
    id = serializers.CharField()
    externalId = serializers.CharField(source="external_id")
    name = serializers.CharField()
    category = serializers.CharField(source="category.value")
    lengthKm = serializers.FloatField(source="length_km")
    coordinates = serializers.ListField(child=CoordinateField())


class HighlightSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    externalId = serializers.CharField(source="external_id")
    name = serializers.CharField()
    category = serializers.CharField(source="category.value")
    lengthKm = serializers.FloatField(source="length_km")
    coordinates = serializers.ListField(child=CoordinateField())
    createdAt = serializers.DateTimeField(source="created_at")


class HighlightCreateSerializer(serializers.Serializer):
    """
    Body of POST /api/highlights: a road snapshot without id / createdAt.
    """
    externalId = serializers.CharField(source="external_id", max_length=64)
    name = serializers.CharField(max_length=255)
    category = serializers.ChoiceField(choices=[category.value for category in RoadCategory])
    lengthKm = serializers.FloatField(source="length_km", min_value=0)
    coordinates = serializers.ListField(child=CoordinateField(), min_length=1)

    def validate_coordinates(self, value):
        for lat, lng in value:
            if not (-90 <= lat <= 90 and -180 <= lng <= 180):
                raise serializers.ValidationError(f"[{lat}, {lng}] is not a valid lat/lng pair.")
        return value

    def to_new_highlight(self) -> NewHighlight:
        data = self.validated_data
        return NewHighlight(
            external_id=data["external_id"],
            name=data["name"],
            category=RoadCategory(data["category"]),
            length_km=data["length_km"],
            coordinates=tuple((lat, lng) for lat, lng in data["coordinates"]),
        )


class CoordinatorStatsSerializer(serializers.Serializer):
    exactHits = serializers.IntegerField(source="exact_hits")
    containmentHits = serializers.IntegerField(source="containment_hits")
    masterHits = serializers.IntegerField(source="master_hits")
    fetches = serializers.IntegerField()
    fetchFailures = serializers.IntegerField(source="fetch_failures")
    coalesced = serializers.IntegerField()
    evictions = serializers.IntegerField()
    cacheEntries = serializers.IntegerField(source="cache_entries")
    hasMasterCache = serializers.BooleanField(source="has_master_cache")
