"""
API Exception Handler

Translates domain exceptions into JSON responses:

    {"detail": "Human readable message", "code": "stable_error_code"}

Everything else is handed to DRF's default handler, so serializer
validation errors keep their usual shape.
"""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER hook."""
    if isinstance(exc, DomainError):
        view = context.get('view')
        logger.warning(
            f"Domain error in {view.__class__.__name__ if view else 'unknown view'}: "
            f"{exc.code}: {exc.message}"
        )
        return Response({'detail': exc.message, 'code': exc.code}, status=exc.status_code)

    return exception_handler(exc, context)
