"""
Custom exception handling for the API.
"""

import logging
import traceback

from django.conf import settings
from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidFilterParameter(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid filter parameter.'
    default_code = 'invalid_filter'


class ImageUploadError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Image upload failed. Please try again.'
    default_code = 'image_upload_failed'


def _message_from_detail(detail):
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return _message_from_detail(detail[0])
    if isinstance(detail, dict) and 'detail' in detail:
        return _message_from_detail(detail['detail'])
    return None


def api_exception_handler(exc, context):
    """
    Wrap every error in the `{"success": false, "message": ...}` envelope.

    DRF-known exceptions keep their status code; uniqueness violations become
    409; anything else is logged and reported as a 500.
    """
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            body = {
                'success': False,
                'message': 'Validation failed',
                'errors': response.data,
            }
        else:
            body = {
                'success': False,
                'message': _message_from_detail(response.data) or str(exc),
            }
        response.data = body
        return response

    if isinstance(exc, IntegrityError):
        logger.info(f"409: {exc}")
        return Response(
            {
                'success': False,
                'message': 'A record with the same unique value already exists.',
                'error': str(exc) if settings.DEBUG else None,
            },
            status=status.HTTP_409_CONFLICT
        )

    logger.exception(f"Unhandled exception: {exc}")
    return Response(
        {
            'success': False,
            'message': 'Internal server error',
            'error': str(exc) if settings.DEBUG else None,
            'details': traceback.format_exc() if settings.DEBUG else None,
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
