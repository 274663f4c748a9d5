"""
Roads domain package.

Public API:
- Domain models: Road, RoadCategory, classify
- Policies: RoadCachePolicy, ThrottlePolicy (+ default factories)
- Caching: RoadCache, RoadCacheEntry, RoadCoordinator, CoordinatorStats
- Throttling: ViewportThrottle, ManualScheduler, ThreadingScheduler, ViewportSession
- Selection: RoadSelection, SelectionSummary

"""
from .models import Road, RoadCategory
from .classification import classify
from .policy import RoadCachePolicy, ThrottlePolicy, default_cache_policy, default_throttle_policy
from .cache import RoadCache, RoadCacheEntry
from .coordinator import CoordinatorStats, RoadCoordinator
from .scheduler import ManualScheduler, ScheduledTask, ThreadingScheduler
from .throttle import ViewportThrottle
from .viewport import ViewportSession
from .selection import RoadSelection, SelectionSummary

__all__ = ["Road",
           "RoadCategory",
             "classify",
             "RoadCachePolicy",
             "ThrottlePolicy",
             "default_cache_policy",
             "default_throttle_policy",
             "RoadCache",
             "RoadCacheEntry",
             "CoordinatorStats",
             "RoadCoordinator",
             "ManualScheduler",
             "ScheduledTask",
             "ThreadingScheduler",
             "ViewportThrottle",
             "ViewportSession",
             "RoadSelection",
             "SelectionSummary",
               ]
