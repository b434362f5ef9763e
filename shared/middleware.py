# shared/middleware.py
"""
Security middleware for additional HTTP security headers.

Other security headers (X-Frame-Options, HSTS) are set via Django settings.
"""


class SecurityHeadersMiddleware:
    """
    Add additional security headers to all responses.

    - X-Content-Type-Options: nosniff
    - Referrer-Policy: strict-origin-when-cross-origin
    - Permissions-Policy: deny browser features the API never needs
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        response['X-Content-Type-Options'] = 'nosniff'
        response['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response['Permissions-Policy'] = (
            'geolocation=(), '
            'microphone=(), '
            'camera=(), '
            'payment=()'
        )

        return response
