"""Render service-layer exceptions as API responses."""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from services.exceptions import MarketplaceError

logger = logging.getLogger(__name__)


def marketplace_exception_handler(exc, context):
    """
    DRF exception handler.

    Domain errors become ``{"success": false, "error": <code>, "message": <text>}``
    with the status carried by the exception; everything else goes through
    DRF's default handler.
    """
    if isinstance(exc, MarketplaceError):
        view = context.get("view")
        logger.warning(
            "%s rejected: %s (%s)",
            view.__class__.__name__ if view else "request",
            exc.message,
            exc.code,
        )
        return Response(
            {
                "success": False,
                "error": exc.code,
                "message": exc.message,
            },
            status=exc.status_code,
        )

    response = exception_handler(exc, context)
    if response is not None and response.status_code == status.HTTP_401_UNAUTHORIZED:
        response.data = {
            "success": False,
            "error": "not_authenticated",
            "message": response.data.get("detail", "Authentication required")
            if isinstance(response.data, dict) else "Authentication required",
        }
    return response
