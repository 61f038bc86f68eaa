"""
Response envelope shared by every API view.

Every endpoint answers with ``{"success": bool, "message"?, "data"?, "error"?}``
plus optional top-level extras (pagination, summary, ...).
"""

from __future__ import annotations

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("bondex.request")


def api_success(
    *,
    data=None,
    message: str | None = None,
    http_status: int = status.HTTP_200_OK,
    **extra,
) -> Response:
    payload: dict = {"success": True}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return Response(payload, status=http_status)


def api_error(
    *,
    message: str,
    field: str | None = None,
    error: str | None = None,
    errors: dict | None = None,
    http_status: int = status.HTTP_400_BAD_REQUEST,
) -> Response:
    payload: dict = {"success": False, "message": message}
    if error:
        payload["error"] = error
    if field:
        payload["field"] = field
    if errors:
        payload["errors"] = errors
    return Response(payload, status=http_status)


def _first_message(detail) -> str:
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    if isinstance(detail, dict) and detail:
        key, value = next(iter(detail.items()))
        message = _first_message(value)
        return message if key == "non_field_errors" else f"{key}: {message}"
    return str(detail)


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception(
            "unhandled_api_error",
            extra={"view": view.__class__.__name__ if view else "", "error_code": "server_error"},
        )
        return api_error(
            message="Internal server error",
            error=str(exc),
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        errors = exc.detail if isinstance(exc.detail, dict) else None
        response.data = {
            "success": False,
            "message": _first_message(exc.detail),
            **({"errors": errors} if errors else {}),
        }
        return response

    detail = getattr(exc, "detail", None)
    response.data = {"success": False, "message": _first_message(detail) if detail else str(exc)}
    return response
