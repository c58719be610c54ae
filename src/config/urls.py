"""
URL configuration for the storefront project.

- /api/* - JSON API consumed by the catalog, cart and admin pages
- /health/, /health/ready/ - Infrastructure checks
"""
from django.urls import path, include

urlpatterns = [
    # JSON API
    path('api/', include('apps.api.urls')),

    # Health/Ready checks
    path('health/', include('apps.core.urls_health')),
]
