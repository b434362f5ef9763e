# apps/api/v1/urls.py
"""
URL routing for API v1.

All API endpoints are mounted under /api/v1/
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

from .views.auth import CookieTokenObtainPairView, CookieTokenRefreshView, CookieLogoutView
from .views.billing import InvoiceViewSet
from .views.clients import ClientViewSet
from .views.health import health_check
from .views.vehicles import VehicleViewSet

# Create router and register viewsets
router = DefaultRouter()
router.register(r'clients', ClientViewSet, basename='client')
router.register(r'vehicles', VehicleViewSet, basename='vehicle')
router.register(r'billing', InvoiceViewSet, basename='invoice')

urlpatterns = [
    path('health/', health_check, name='health-check'),

    # Cookie-based auth for browser clients
    path('auth/login/', CookieTokenObtainPairView.as_view(), name='auth-login'),
    path('auth/refresh/', CookieTokenRefreshView.as_view(), name='auth-refresh'),
    path('auth/logout/', CookieLogoutView.as_view(), name='auth-logout'),

    # Header-based JWT for scripts and scheduled jobs
    path('auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('auth/token/verify/', TokenVerifyView.as_view(), name='token-verify'),

    path('', include(router.urls)),
]
