import logging
import time
from django.utils.deprecation import MiddlewareMixin
from django.http import JsonResponse

from .exceptions import ShopError, StorageError

logger = logging.getLogger(__name__)


class GlobalExceptionMiddleware(MiddlewareMixin):
    """
    Errors escaping plain Django views under /api/ (health check, schema)
    get the same JSON bodies as the DRF views. Admin pages keep Django's
    HTML error handling.
    """
    def process_exception(self, request, exception):
        if not request.path.startswith('/api/'):
            logger.exception(f"{request.method} {request.path} failed: {exception}")
            return None

        if isinstance(exception, StorageError):
            logger.error(f"{request.method} {request.path} storage failure: {exception.message}")
            return JsonResponse({"error": exception.message}, status=exception.status_code)

        if isinstance(exception, ShopError):
            logger.warning(f"{request.method} {request.path} -> {exception.status_code}: {exception.message}")
            return JsonResponse(
                {"success": False, "message": exception.message, "code": exception.code},
                status=exception.status_code,
            )

        logger.exception(f"{request.method} {request.path} failed: {exception}")
        return JsonResponse(
            {"error": "Internal Server Error", "code": "server_error"},
            status=500,
        )


class RequestLogMiddleware:
    """
    One log line per API request: method, path, status, duration.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith('/api/'):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000

        logger.info(
            "%s %s -> %s (%.1fms)",
            request.method, request.path, response.status_code, elapsed_ms,
        )
        return response
