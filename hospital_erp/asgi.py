"""
ASGI config for the hospital ERP project.

Plain HTTP only; the API has no WebSocket surface.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hospital_erp.settings")

application = get_asgi_application()
