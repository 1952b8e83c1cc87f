"""Project-wide DRF exception handler."""
import logging

from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Render API errors as ``{"error": <code>, "detail": <message>}``.

    Validation errors keep DRF's field-keyed body so clients can show
    per-field messages.
    """
    response = exception_handler(exc, context)
    if response is None:
        logger.exception("Unhandled error in %s", context.get('view').__class__.__name__)
        return None

    if response.status_code >= 500:
        logger.error("API error %s: %s", response.status_code, exc)

    detail = getattr(exc, 'detail', None)
    if isinstance(detail, (dict, list)):
        return response

    codes = exc.get_codes() if hasattr(exc, 'get_codes') else 'error'
    response.data = {
        'error': codes if isinstance(codes, str) else 'error',
        'detail': str(detail) if detail is not None else str(exc),
    }
    return response
