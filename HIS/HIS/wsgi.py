"""
WSGI config for the HIS project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'HIS.settings')

application = get_wsgi_application()
