from __future__ import annotations

import logging

from django.http import HttpRequest, JsonResponse

logger = logging.getLogger("bondex.request")


def handle_403(request: HttpRequest, exception=None) -> JsonResponse:
    return JsonResponse({"success": False, "message": "Access denied."}, status=403)


def handle_404(request: HttpRequest, exception=None) -> JsonResponse:
    return JsonResponse(
        {"success": False, "message": f"Route {request.path} not found"},
        status=404,
    )


def handle_500(request: HttpRequest) -> JsonResponse:
    logger.error(
        "server_error",
        extra={"status_code": 500, "error_code": "server_error", "path": request.path},
    )
    return JsonResponse({"success": False, "message": "Internal server error"}, status=500)


def healthz(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"status": "ok"})
