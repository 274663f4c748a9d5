from django.urls import path, include
from rest_framework.routers import DefaultRouter
from backend.mapping.views import RoadViewSet, HighlightViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'roads', RoadViewSet, basename='road')
router.register(r'highlights', HighlightViewSet, basename='highlight')

urlpatterns = [
    path('api/', include(router.urls)),
]
