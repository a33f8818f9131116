"""
ASGI config for the HIS project.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'HIS.settings')

application = get_asgi_application()
