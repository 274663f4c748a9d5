"""
WSGI config for the road map backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.roadmap_backend.settings")

application = get_wsgi_application()
