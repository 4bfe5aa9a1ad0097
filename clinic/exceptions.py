"""
Uniform error envelope for the REST API.

Every error leaves the API as ``{'ok': False, 'error': {...}}`` so the
client only has to understand one shape.  Validation errors carry the
per-field messages under ``fields``.  Anything DRF does not recognise is
logged with its traceback and reported as a generic 500.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    400: 'invalid',
    401: 'not_authenticated',
    403: 'permission_denied',
    404: 'not_found',
    405: 'method_not_allowed',
    409: 'conflict',
    429: 'throttled',
}


class Conflict(APIException):
    """The request clashes with the current state of a record."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict with existing data.'
    default_code = 'conflict'


def _first_message(data) -> str:
    if isinstance(data, list):
        return _first_message(data[0]) if data else ''
    if isinstance(data, dict):
        for value in data.values():
            return _first_message(value)
        return ''
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("Unhandled API error: %s", exc)
        return Response(
            {'ok': False, 'error': {'code': 'server_error', 'message': 'Internal server error'}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code = _STATUS_CODES.get(resp.status_code, 'api_error')
    if isinstance(exc, ValidationError):
        fields = resp.data if isinstance(resp.data, dict) else {'non_field_errors': resp.data}
        error = {'code': code, 'message': _first_message(fields) or 'Invalid input.', 'fields': fields}
    else:
        detail = resp.data.get('detail', resp.data) if isinstance(resp.data, dict) else resp.data
        error = {'code': code, 'message': str(detail)}
    # keep the headers DRF set (WWW-Authenticate, Retry-After)
    resp.data = {'ok': False, 'error': error}
    return resp
