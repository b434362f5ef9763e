# apps/api/exceptions.py
"""
DRF exception handler that returns the error envelope:

    {"success": false, "message": "...", "errors": ..., "code": "..."}

Django ValidationError (raised by services) becomes 400,
ObjectDoesNotExist becomes 404 and ProtectedError becomes 409. Anything
DRF does not recognise is left to propagate as a 500.
"""
import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _validation_details(exc):
    if hasattr(exc, 'error_dict'):
        return exc.message_dict
    return exc.messages


def _first_message(data):
    """Pull a human readable message out of DRF error data."""
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        for key, value in data.items():
            message = _first_message(value)
            if message:
                return message if key == 'non_field_errors' else f"{key}: {message}"
        return ''
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ''
    return str(data)


def envelope_exception_handler(exc, context):
    code = None

    if isinstance(exc, DjangoValidationError):
        code = getattr(exc, 'code', None)
        exc = exceptions.ValidationError(detail=_validation_details(exc))
    elif isinstance(exc, ProtectedError):
        return Response(
            {
                'success': False,
                'message': 'Cannot delete: this record is referenced by other records.',
                'errors': [str(obj) for obj in list(exc.protected_objects)[:10]],
            },
            status=status.HTTP_409_CONFLICT,
        )
    elif isinstance(exc, ObjectDoesNotExist):
        exc = exceptions.NotFound(detail=str(exc) or 'Not found.')

    response = exception_handler(exc, context)
    if response is None:
        return None

    view = context.get('view')
    logger.info(
        f'{response.status_code} from {view.__class__.__name__ if view else "unknown view"}: '
        f'{_first_message(response.data)}'
    )

    payload = {
        'success': False,
        'message': _first_message(response.data),
        'errors': response.data,
    }
    if code:
        payload['code'] = code
    response.data = payload
    return response
