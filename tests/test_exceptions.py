"""
Tests for the error taxonomy and the DRF exception handler.
"""

import pytest
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, ValidationError

from core.exceptions import (
    Conflict,
    Forbidden,
    InvalidInput,
    InvalidState,
    MarketplaceError,
    NotFound,
    marketplace_exception_handler,
)


@pytest.mark.parametrize('error_class, http_status, code', [
    (InvalidInput, status.HTTP_400_BAD_REQUEST, 'invalid_input'),
    (NotFound, status.HTTP_404_NOT_FOUND, 'not_found'),
    (Forbidden, status.HTTP_403_FORBIDDEN, 'forbidden'),
    (InvalidState, status.HTTP_400_BAD_REQUEST, 'invalid_state'),
    (Conflict, status.HTTP_409_CONFLICT, 'conflict'),
])
def test_error_kinds_render_with_stable_codes(error_class, http_status, code):
    error = error_class('Something specific went wrong.')
    assert isinstance(error, MarketplaceError)
    assert error.code == code

    response = marketplace_exception_handler(error, {})

    assert response.status_code == http_status
    assert response.data == {'detail': 'Something specific went wrong.', 'code': code}


def test_default_message_used_when_none_given():
    response = marketplace_exception_handler(Conflict(), {})
    assert response.data['detail'] == Conflict.default_detail


def test_http404_becomes_not_found():
    response = marketplace_exception_handler(Http404('No Listing matches the given query.'), {})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data['code'] == 'not_found'


def test_drf_errors_gain_code():
    response = marketplace_exception_handler(NotAuthenticated(), {})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.data['code'] == 'not_authenticated'


def test_field_errors_reported_as_invalid_input():
    response = marketplace_exception_handler(ValidationError({'status': ['This field is required.']}), {})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data['code'] == 'invalid_input'
    assert response.data['detail'] == InvalidInput.default_detail
    assert response.data['errors'] == {'status': ['This field is required.']}


def test_non_api_exceptions_are_not_handled():
    assert marketplace_exception_handler(RuntimeError('boom'), {}) is None
