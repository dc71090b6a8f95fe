import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

ERROR_CODES = {
    400: 'validation_error',
    401: 'not_authenticated',
    403: 'permission_denied',
    404: 'not_found',
    405: 'method_not_allowed',
    429: 'throttled',
}

# Headers DRF sets on error responses that clients rely on
PASSTHROUGH_HEADERS = ('WWW-Authenticate', 'Retry-After', 'Allow')


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        if 'detail' in detail and len(detail) == 1:
            return str(detail['detail'])
        field, errors = next(iter(detail.items()))
        message = _first_message(errors)
        return message if field in ('nonFieldErrors', 'non_field_errors') else f'{field}: {message}'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error in %s: %s", context.get('view').__class__.__name__, exc)
        exc = exceptions.ValidationError({'nonFieldErrors': ['Conflicts with an existing record']})
    elif isinstance(exc, DjangoValidationError):
        exc = exceptions.ValidationError(exc.message_dict if hasattr(exc, 'error_dict') else exc.messages)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.error("Unhandled error in %s", context.get('view').__class__.__name__, exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)

    error = {
        'code': ERROR_CODES.get(resp.status_code, 'api_error'),
        'message': _first_message(resp.data),
    }
    if isinstance(exc, exceptions.ValidationError) and isinstance(resp.data, dict):
        error['fields'] = resp.data
    headers = {h: resp[h] for h in PASSTHROUGH_HEADERS if resp.has_header(h)}
    return Response({'ok': False, 'error': error}, status=resp.status_code, headers=headers)
