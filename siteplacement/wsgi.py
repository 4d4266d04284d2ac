"""Point d'entrée WSGI (gunicorn siteplacement.wsgi:application)."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "siteplacement.settings.prod")

application = get_wsgi_application()
