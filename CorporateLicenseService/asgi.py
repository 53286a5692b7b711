"""
ASGI config for CorporateLicenseService project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "CorporateLicenseService.settings.prod")

application = get_asgi_application()
