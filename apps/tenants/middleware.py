# apps/tenants/middleware.py
"""
TenantMiddleware - Resolves the current tenant from the request.

Must run after AuthenticationMiddleware and before any tenant-scoped query.

Resolution order:
1. HTTP_X_TENANT_ID header (API clients; only honoured for members)
2. Subdomain (e.g., acme.autoledger.app -> acme)
3. Default tenant (for development)
"""
import logging

from django.http import JsonResponse

from shared.managers import set_current_tenant
from .models import Tenant

logger = logging.getLogger(__name__)

# Paths that work without a tenant
TENANT_EXEMPT_PREFIXES = (
    '/admin/',
    '/static/',
    '/media/',
    '/api/schema/',
    '/api/docs/',
    '/api/redoc/',
    '/api/v1/health/',
    '/api/v1/auth/',
)

IGNORED_SUBDOMAINS = ('www', 'api', 'admin', 'localhost', '127')


class TenantMiddleware:
    """
    Middleware to resolve tenant from request and set in thread-local storage.

    This enables automatic query scoping via TenantManager.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        tenant = self.get_tenant_from_request(request)

        if not tenant and not request.path.startswith(TENANT_EXEMPT_PREFIXES):
            logger.warning(f'No tenant resolved for {request.get_host()}{request.path}')
            return JsonResponse(
                {
                    'success': False,
                    'message': 'No tenant found. Please access via subdomain or contact support.',
                },
                status=403,
            )

        request.tenant = tenant
        set_current_tenant(tenant)

        try:
            response = self.get_response(request)
        finally:
            # Always clear tenant after request completes (thread pools reuse threads)
            set_current_tenant(None)

        return response

    def get_tenant_from_request(self, request):
        """
        Resolve tenant from request using multiple strategies.

        Returns:
            Tenant instance or None
        """
        tenant_id = request.META.get('HTTP_X_TENANT_ID')
        if tenant_id:
            try:
                tenant_id_int = int(tenant_id)
                user = getattr(request, 'user', None)
                if user and user.is_authenticated:
                    if user.is_superuser:
                        return Tenant.objects.filter(id=tenant_id_int, is_active=True).first()
                    if getattr(user, 'tenant_id', None) == tenant_id_int:
                        return Tenant.objects.filter(id=tenant_id_int, is_active=True).first()
                # Not a member: fall through to the other strategies
            except (ValueError, TypeError):
                pass

        host = request.get_host().split(':')[0]
        parts = host.split('.')

        if len(parts) >= 2:
            subdomain = parts[0]
            if subdomain not in IGNORED_SUBDOMAINS:
                tenant = Tenant.objects.filter(subdomain=subdomain, is_active=True).first()
                if tenant:
                    return tenant

        return Tenant.objects.filter(is_default=True, is_active=True).first()
