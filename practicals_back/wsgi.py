"""
WSGI config for practicals_back project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "practicals_back.settings")

application = get_wsgi_application()
