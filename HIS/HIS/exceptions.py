"""
Error taxonomy shared by the registry apps and the DRF exception handler
that renders every failure as ``{"message": ...}``.
"""
import logging

from django.http import Http404
from django.core.exceptions import PermissionDenied
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = 'Internal server error'


class RegistryError(exceptions.APIException):
    """Base class for errors raised by the registry services."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_ERROR_MESSAGE
    default_code = 'error'


class ValidationError(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'invalid'


class NotFoundError(RegistryError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class ConflictError(RegistryError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict.'
    default_code = 'conflict'


class Unauthorized(exceptions.NotAuthenticated, RegistryError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Authentication credentials were not provided.'
    default_code = 'not_authenticated'


class InternalError(RegistryError):
    pass


def parse_id(value, message):
    """Convert a path parameter to an int, raising ValidationError otherwise."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)


def _flatten(data):
    if isinstance(data, dict):
        if set(data) == {'detail'}:
            return _flatten(data['detail'])
        parts = []
        for field, value in data.items():
            if field in ('non_field_errors', 'detail'):
                parts.append(_flatten(value))
            else:
                parts.append(f"{field}: {_flatten(value)}")
        return '; '.join(parts)
    if isinstance(data, (list, tuple)):
        return ' '.join(_flatten(item) for item in data)
    return str(data)


def api_exception_handler(exc, context):
    """
    Render errors as ``{"message": str}``.

    Serializer errors are flattened into a single message. Anything DRF does
    not recognise is logged with its traceback and answered with a generic
    500 so no internals reach the caller.
    """
    if isinstance(exc, Http404):
        exc = NotFoundError(str(exc) or None)
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown view'

    if response is None:
        logger.error(f"Unhandled error in {view_name}: {exc}", exc_info=exc)
        return Response(
            {'message': GENERIC_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, InternalError) or response.status_code >= 500:
        logger.error(f"Internal error in {view_name}: {exc}", exc_info=exc)
        response.data = {'message': GENERIC_ERROR_MESSAGE}
        return response

    if isinstance(exc, exceptions.ValidationError):
        response.data = {'message': f"Validation error: {_flatten(response.data)}"}
    else:
        response.data = {'message': _flatten(response.data)}
    return response
