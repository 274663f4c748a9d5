import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class MappingConfig(AppConfig):
    name = "backend.mapping"
    label = "mapping"

    def ready(self):
        # master cache is filled once per process, before the first request
        if settings.ROADS_PRELOAD_MASTER_CACHE:
            from .services import services

            loaded = services.road_coordinator().load_master_cache()
            logger.info("Master cache preloaded with %d roads", loaded)
