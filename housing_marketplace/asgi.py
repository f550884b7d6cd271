"""
ASGI config for housing_marketplace project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'housing_marketplace.settings')

application = get_asgi_application()
