# apps/api/urls.py
"""
API URL configuration: versioned routes plus the OpenAPI schema.

Schema and docs paths are tenant-exempt in TenantMiddleware, so they stay
reachable on the bare domain.
"""
from django.urls import path, include
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

app_version_patterns = [
    path('v1/', include('apps.api.v1.urls')),
]

schema_patterns = [
    path('schema/', SpectacularAPIView.as_view(), name='schema'),
    path('docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]

urlpatterns = app_version_patterns + schema_patterns
