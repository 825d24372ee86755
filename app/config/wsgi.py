"""
WSGI config for the Django application.

Exposes the WSGI callable as a module-level variable named `application`
for gunicorn or any other WSGI server. The API is fully synchronous, so
either this entry point or config.asgi can serve it.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
