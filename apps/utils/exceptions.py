from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

from .utils import first_error

logger = logging.getLogger(__name__)


class ShopError(Exception):
    """
    Base for every domain failure (server services and the storefront client).
    Carries a user-facing message, a machine code and the HTTP status it maps to.
    """
    code = "shop_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, code=None):
        self.message = message
        if code:
            self.code = code
        super().__init__(message)


class FetchError(ShopError):
    """Backend unreachable, bad status or unreadable body (client side)."""
    code = "fetch_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ValidationError(ShopError):
    """Missing required fields, empty cart, tampered totals."""
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ShopError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class AuthError(ShopError):
    code = "auth_error"
    status_code = status.HTTP_401_UNAUTHORIZED


class ThrottledError(ShopError):
    """Too many register/login attempts from one client."""
    code = "throttled"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class StorageError(ShopError):
    """Backing-store failure. The message shown to users stays generic."""
    code = "storage_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


STATUS_ERRORS = {
    status.HTTP_400_BAD_REQUEST: ValidationError,
    status.HTTP_401_UNAUTHORIZED: AuthError,
    status.HTTP_409_CONFLICT: ConflictError,
    status.HTTP_429_TOO_MANY_REQUESTS: ThrottledError,
}


def error_for_status(status_code):
    """
    Map an HTTP error status back to the exception class the server raised.
    """
    if status_code >= 500:
        return StorageError
    return STATUS_ERRORS.get(status_code, ValidationError)


def custom_exception_handler(exc, context):
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if isinstance(exc, StorageError):
        logger.error(f"Storage failure: {exc.message}", exc_info=exc)
        return Response({"error": exc.message}, status=exc.status_code)

    # Domain errors answer in the shape the storefront expects
    if isinstance(exc, ShopError):
        view = context.get("view")
        key = getattr(view, "error_key", "message")
        return Response(
            {"success": False, key: exc.message, "code": exc.code},
            status=exc.status_code,
        )

    # If response is None, it's an unhandled server error (500)
    if response is None:
        logger.error(f"Unhandled Exception: {exc}", exc_info=exc)
        return Response(
            {"error": "Internal Server Error", "code": "server_error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    # DRF's own errors (parse, throttle, method) get the same body as ours;
    # headers such as Retry-After and Allow stay on the response
    view = context.get("view")
    key = getattr(view, "error_key", "message")
    detail = response.data
    if isinstance(detail, dict) and "detail" in detail:
        message = str(detail["detail"])
    else:
        message = first_error(detail, include_field=False)
    response.data = {
        "success": False,
        key: message,
        "code": getattr(exc, "default_code", "error"),
    }
    return response
