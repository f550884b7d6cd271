"""
Failure taxonomy for booking and review operations.

Each failure is a DRF APIException so the same error raised from a service
function surfaces with the right status code from a view, and carries a
stable code that callers outside HTTP (admin actions, management commands)
can inspect.
"""

import logging

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class MarketplaceError(APIException):
    """Base class for booking, review and rating failures."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The request could not be processed.'
    default_code = 'error'

    @property
    def code(self):
        return self.default_code

    @property
    def message(self):
        return str(self.detail)


class InvalidInput(MarketplaceError):
    """Malformed, missing or out-of-range request data."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'invalid_input'


class NotFound(MarketplaceError):
    """Referenced booking, listing or review does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class Forbidden(MarketplaceError):
    """Actor lacks rights over the target entity."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Not authorized.'
    default_code = 'forbidden'


class InvalidState(MarketplaceError):
    """Operation not permitted in the entity's current state."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Operation not allowed in the current state.'
    default_code = 'invalid_state'


class Conflict(MarketplaceError):
    """Uniqueness or single-use invariant violated."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict with the current state of the resource.'
    default_code = 'conflict'


def marketplace_exception_handler(exc, context):
    """
    DRF exception handler adding a stable error code to the response body.

    Error responses have the shape {"detail": "...", "code": "..."} for
    marketplace failures. Serializer validation errors report as invalid_input
    with the field errors under "errors"; other DRF errors keep their usual
    body and gain a "code" key when the body is a dict with a single detail.
    """
    if isinstance(exc, Http404):
        exc = NotFound(str(exc) or NotFound.default_detail)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, MarketplaceError):
        request = context.get('request')
        view = context.get('view')
        logger.warning(
            f"Request rejected ({exc.code}): {exc.message} "
            f"View: {type(view).__name__ if view else None}, "
            f"User ID: {getattr(getattr(request, 'user', None), 'id', None)}"
        )
        response.data = {'detail': exc.message, 'code': exc.code}
    elif isinstance(exc, ValidationError):
        response.data = {
            'detail': InvalidInput.default_detail,
            'code': InvalidInput.default_code,
            'errors': response.data,
        }
    elif isinstance(response.data, dict) and 'detail' in response.data:
        detail = exc.detail if hasattr(exc, 'detail') else None
        code = getattr(detail, 'code', None)
        if code:
            response.data['code'] = code

    return response
