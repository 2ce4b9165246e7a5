"""
Единый формат ошибок JSON API.

Любая ошибка отдаётся как {"message": str, "errors": {...}?}:
    - ServiceError и наследники: свой status_code
    - исключения DRF (ValidationError, NotAuthenticated, ...): статус DRF
    - IntegrityError: 409, ProtectedError: 400
    - всё остальное: 500 без деталей, с записью в лог
"""

import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from .errors import ServiceError

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Достаёт первое текстовое сообщение из вложенной структуры DRF."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return 'Validation failed'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Validation failed'
    return str(detail)


def _request_path(context):
    request = context.get('request')
    return getattr(request, 'path', '?')


def api_exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        set_rollback()
        logger.warning('%s on %s: %s', type(exc).__name__, _request_path(context), exc.message)
        return Response(exc.to_payload(), status=exc.status_code)

    if isinstance(exc, IntegrityError):
        set_rollback()
        logger.warning('IntegrityError on %s: %s', _request_path(context), exc)
        return Response({'message': 'Duplicate or conflicting value'}, status=status.HTTP_409_CONFLICT)

    if isinstance(exc, ProtectedError):
        set_rollback()
        return Response({'message': 'Object is still referenced and cannot be deleted'},
                        status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is None:
        set_rollback()
        logger.error('Unhandled API error on %s', _request_path(context), exc_info=exc)
        return Response({'message': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        detail = exc.detail
        payload = {'message': _first_message(detail)}
        if isinstance(detail, dict):
            payload['errors'] = detail
        response.data = payload
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'message': str(response.data['detail'])}
    return response
