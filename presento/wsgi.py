"""WSGI entry point for the Presento storefront."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "presento.settings")

application = get_wsgi_application()
