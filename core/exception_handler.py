import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.http import Http404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import Forbidden, NotFound, PersistenceError

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    400: 'Validation error',
    401: 'Authentication required',
    403: 'Permission denied',
    404: 'Resource not found',
    405: 'Method not allowed',
    429: 'Too many requests',
}


def _error_body(code, message, details, status_code):
    return {
        'error': True,
        'code': code,
        'message': message,
        'details': details,
        'status_code': status_code,
    }


def custom_exception_handler(exc, context):
    """
    Render every API error with the same envelope:
    {"error": true, "code", "message", "details", "status_code"}
    """
    # Give Django's own 404/403 the same codes as ours
    if isinstance(exc, Http404):
        exc = NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = Forbidden()

    response = exception_handler(exc, context)

    if response is not None:
        detail = getattr(exc, 'detail', response.data)
        if isinstance(detail, (list, dict)):
            code = 'invalid' if response.status_code == 400 else getattr(exc, 'default_code', 'error')
            message = STATUS_MESSAGES.get(response.status_code, 'An error occurred')
            details = response.data
        else:
            code = exc.get_codes() if hasattr(exc, 'get_codes') else 'error'
            message = str(detail)
            details = {}
        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            code = 'unauthenticated'
        response.data = _error_body(code, message, details, response.status_code)
        return response

    if isinstance(exc, DjangoValidationError):
        logger.warning("Validation error: %s", exc)
        return Response(
            _error_body('invalid', 'Validation error', {'non_field_errors': exc.messages}, 400),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, DatabaseError):
        logger.error("Persistence error: %s", exc)
        return Response(
            _error_body(
                PersistenceError.default_code,
                str(PersistenceError.default_detail),
                {},
                PersistenceError.status_code,
            ),
            status=PersistenceError.status_code,
        )

    # Anything else is a bug; let Django report it
    return None
