# apps/api/authentication.py
"""
JWT authentication for the billing API.

Tokens are read from the httpOnly access cookie set by the login view, then
from the Authorization header (scripts and scheduled jobs). Users of a
deactivated tenant are refused even when their token is still valid.
"""
import logging

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = 'autoledger_access'
REFRESH_TOKEN_COOKIE = 'autoledger_refresh'


class CookieJWTAuthentication(JWTAuthentication):
    """Read the access token from the cookie, falling back to the header."""

    def authenticate(self, request):
        raw_token = request.COOKIES.get(ACCESS_TOKEN_COOKIE)
        if not raw_token:
            return super().authenticate(request)

        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, TokenError):
            # A stale cookie must not mask a valid Authorization header
            logger.debug('Ignoring invalid access cookie')
            return super().authenticate(request)

        return self.get_user(validated_token), validated_token

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        tenant = getattr(user, 'tenant', None)
        if tenant is not None and not tenant.is_active:
            logger.warning(f'Rejected token for user {user.pk}: tenant {tenant.pk} is inactive')
            raise AuthenticationFailed('Organization is inactive', code='tenant_inactive')
        return user
