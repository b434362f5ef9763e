# apps/api/responses.py
"""
Response envelope shared by the billing endpoints:

    {"success": true, "message": "...", "data": ...}

Errors use the same shape via apps.api.exceptions.
"""
from rest_framework import status as http_status
from rest_framework.response import Response


def success_response(data=None, message='', status=http_status.HTTP_200_OK):
    return Response(
        {
            'success': True,
            'message': message,
            'data': data,
        },
        status=status,
    )
