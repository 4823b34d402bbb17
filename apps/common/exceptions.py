import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    Throttled,
)
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class NotFoundError(NotFound):
    """Raised when a referenced entity does not exist."""

    default_detail = "Resource not found."
    default_code = "not_found"
    error_name = "NotFoundError"


class ValidationError(DRFValidationError):
    """Raised when input or a business precondition is violated."""

    default_detail = "Invalid input."
    default_code = "invalid"
    error_name = "ValidationError"


class ConflictError(APIException):
    """Raised when a state-transition guard fails."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The resource is not in a state that allows this operation."
    default_code = "conflict"
    error_name = "ConflictError"


class CapacityError(APIException):
    """Raised when a capacity ceiling would be exceeded."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Capacity exceeded."
    default_code = "capacity_exceeded"
    error_name = "CapacityError"


class DuplicateError(APIException):
    """Raised when the same membership or application is created twice."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "This record already exists."
    default_code = "duplicate"
    error_name = "DuplicateError"


class AccessDeniedError(PermissionDenied):
    """Raised when a role or ownership check fails."""

    default_detail = "Access denied."
    default_code = "access_denied"
    error_name = "AccessDeniedError"


class PartialFailureError(APIException):
    """
    Raised when a multi-entity write sequence committed only partially.

    ``context`` names the entities involved and which writes were committed,
    so that counters can be reconciled afterwards.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "The operation was only partially applied; reconciliation is required."
    default_code = "partial_failure"
    error_name = "PartialFailureError"

    def __init__(self, detail=None, code=None, context=None):
        super().__init__(detail=detail, code=code)
        self.context = context or {}


# Framework exceptions mapped onto the taxonomy names above
ERROR_NAMES = [
    (NotAuthenticated, "AuthenticationError"),
    (AuthenticationFailed, "AuthenticationError"),
    (NotFound, "NotFoundError"),
    (PermissionDenied, "AccessDeniedError"),
    (DRFValidationError, "ValidationError"),
    (ParseError, "ValidationError"),
    (MethodNotAllowed, "MethodNotAllowed"),
    (Throttled, "Throttled"),
]

EXCEPTION_MAPPING = {
    Http404: NotFoundError,
    ObjectDoesNotExist: NotFoundError,
    DjangoPermissionDenied: AccessDeniedError,
}


def map_django_exception(exc):
    """Map Django exceptions to their API counterparts."""
    for django_exc, api_exc in EXCEPTION_MAPPING.items():
        if isinstance(exc, django_exc):
            return api_exc(detail=str(exc) or None)
    return exc


def get_error_name(exc):
    name = getattr(exc, "error_name", None)
    if name:
        return name
    for exc_class, label in ERROR_NAMES:
        if isinstance(exc, exc_class):
            return label
    return exc.__class__.__name__


def get_error_message(detail):
    """Flatten a DRF error detail into one human readable sentence."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = get_error_message(value)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
        return ""
    if isinstance(detail, (list, tuple)):
        return get_error_message(detail[0]) if detail else ""
    return str(detail)


def expo_exception_handler(exc, context):
    """
    Render every API error as ``{success, message, error}``.

    Validation failures also carry ``errors`` with the field details and
    partial failures carry ``context`` for reconciliation.
    """
    exc = map_django_exception(exc)
    response = exception_handler(exc, context)

    if response is None:
        return None

    request = context.get("request")
    user = getattr(request, "user", None)
    error_name = get_error_name(exc)
    log_extra = {
        "user": user.pk if user is not None and user.is_authenticated else None,
        "path": request.path if request else None,
        "method": request.method if request else None,
        "status_code": response.status_code,
        "error": error_name,
    }

    body = {
        "success": False,
        "message": get_error_message(getattr(exc, "detail", response.data)),
        "error": error_name,
    }

    if isinstance(exc, DRFValidationError) and isinstance(exc.detail, dict):
        body["errors"] = exc.detail

    if isinstance(exc, PartialFailureError):
        body["context"] = exc.context
        logger.critical(
            f"Partial failure, reconciliation required: {exc.detail}",
            extra={**log_extra, "context": exc.context},
        )
    else:
        logger.warning(f"API error {error_name}: {body['message']}", extra=log_extra)

    response.data = body
    return response
