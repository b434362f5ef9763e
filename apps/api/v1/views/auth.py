# apps/api/v1/views/auth.py
"""
JWT authentication views with httpOnly cookie support.

Cookies with the httpOnly flag cannot be read by JavaScript, so a browser
client never handles the raw tokens. Non-browser clients use the plain
token endpoints and the Authorization header.
"""

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView
from drf_spectacular.utils import extend_schema

from apps.api.authentication import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE


def _get_cookie_settings():
    """Cookie flags; secure only outside DEBUG."""
    return {
        'httponly': True,
        'secure': not settings.DEBUG,
        'samesite': 'Lax',
        'path': '/',
    }


def _max_age(lifetime_key):
    return int(settings.SIMPLE_JWT[lifetime_key].total_seconds())


class CookieTokenObtainPairView(TokenObtainPairView):
    """
    Login endpoint that sets JWT tokens in httpOnly cookies.

    POST /api/v1/auth/login/
    Body: { "username": "...", "password": "..." }
    """

    @extend_schema(
        tags=['auth'],
        summary='Login and receive JWT in httpOnly cookies',
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)

        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0])

        response = Response({
            'success': True,
            'message': 'Login successful',
            'data': {
                'id': serializer.user.id,
                'username': serializer.user.username,
                'tenant': serializer.user.tenant_id,
            },
        })

        cookie_settings = _get_cookie_settings()
        response.set_cookie(
            ACCESS_TOKEN_COOKIE,
            serializer.validated_data['access'],
            max_age=_max_age('ACCESS_TOKEN_LIFETIME'),
            **cookie_settings
        )
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            serializer.validated_data['refresh'],
            max_age=_max_age('REFRESH_TOKEN_LIFETIME'),
            **cookie_settings
        )
        return response


class CookieTokenRefreshView(APIView):
    """
    Refresh access token using refresh token from httpOnly cookie.

    POST /api/v1/auth/refresh/
    """
    permission_classes = [AllowAny]

    @extend_schema(
        tags=['auth'],
        summary='Refresh access token from httpOnly cookie',
    )
    def post(self, request, *args, **kwargs):
        refresh_token = request.COOKIES.get(REFRESH_TOKEN_COOKIE)

        if not refresh_token:
            return Response(
                {'success': False, 'message': 'No refresh token provided'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        try:
            refresh = RefreshToken(refresh_token)
        except TokenError:
            return Response(
                {'success': False, 'message': 'Invalid or expired refresh token'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        response = Response({'success': True, 'message': 'Token refreshed', 'data': None})
        response.set_cookie(
            ACCESS_TOKEN_COOKIE,
            str(refresh.access_token),
            max_age=_max_age('ACCESS_TOKEN_LIFETIME'),
            **_get_cookie_settings()
        )
        return response


class CookieLogoutView(APIView):
    """
    Logout by clearing JWT cookies.

    POST /api/v1/auth/logout/
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=['auth'],
        summary='Logout and clear JWT cookies',
    )
    def post(self, request, *args, **kwargs):
        response = Response({'success': True, 'message': 'Logged out successfully', 'data': None})
        response.delete_cookie(ACCESS_TOKEN_COOKIE, path='/')
        response.delete_cookie(REFRESH_TOKEN_COOKIE, path='/')
        return response
