"""
URL configuration for the HIS project. Every API route lives under /api.
"""
from django.contrib import admin
from django.urls import path, include

from .views import health, stats

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health', health, name='health'),
    path('api/stats', stats, name='stats'),
    path('api/', include('userManager.urls')),
    path('api/', include('clients.urls')),
    path('api/', include('programs.urls')),
]
