"""
Security middleware for the storefront.
"""

import logging
from django.conf import settings

logger = logging.getLogger(__name__)

WRITE_METHODS = ('POST', 'PUT', 'PATCH', 'DELETE')


class SecureHeadersMiddleware:
    """
    Additional security headers middleware.

    Adds headers not covered by Django's SecurityMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        # Only add headers in production (when DEBUG is False)
        if not settings.DEBUG:
            # Prevent MIME type sniffing
            response['X-Content-Type-Options'] = 'nosniff'

            # Referrer policy
            response['Referrer-Policy'] = 'strict-origin-when-cross-origin'

            # Permissions policy (formerly Feature-Policy)
            response['Permissions-Policy'] = (
                'camera=(), microphone=(), geolocation=(), '
                'payment=(), usb=()'
            )

        return response


class RequestLoggingMiddleware:
    """
    Logs admin writes and login attempts for auditing.

    Only logs in non-DEBUG mode to avoid noise in development.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if not settings.DEBUG:
            is_admin = request.COOKIES.get('auth') == 'true'

            # Log catalog writes
            if request.path.startswith('/api/') and request.method in WRITE_METHODS:
                logger.info(
                    f'API write: {request.method} {request.path} '
                    f'admin={is_admin} status={response.status_code}'
                )

            # Log authentication attempts
            if request.path == '/api/login/':
                status = 'success' if response.status_code == 200 else 'failed'
                logger.info(
                    f'Auth attempt ({status}): {request.method} {request.path} '
                    f'status={response.status_code}'
                )

        return response
