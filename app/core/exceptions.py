"""Errors the send-message API can answer with.

Every failure of a request is raised as one of the ``ApiError`` subclasses
below and turned into a response by ``error_response``, so all of them share
the ``{"msg": ..., "errors": ...}`` body.
"""

from typing import List, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.models.message import ApiJsonResponse, FieldError

VALIDATION_FAILED_MESSAGE = "Hmm-m! Failed to validate JSON"
DELIVERY_FAILED_MESSAGE = "Uh-oh! Failed to send a message"
DELIVERY_CANCELLED_MESSAGE = "Uh-oh! Sending the message took too long"
INTERNAL_ERROR_MESSAGE = "Hmm-m! Something went wrong"


class ApiError(Exception):
    """Base class of the failures reported to API clients."""

    pass


class MalformedRequest(ApiError):
    """The body is not JSON, or not the JSON object the endpoint expects."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(ApiError):
    """The body parsed but one or more fields broke their rules."""

    def __init__(self, errors: List[FieldError]):
        super().__init__(f"{len(errors)} invalid field(s)")
        self.errors = errors


class DeliveryFailed(ApiError):
    """The email transport gave up after the whole retry budget."""

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(str(cause) if cause else "delivery failed")
        self.cause = cause


class DeliveryCancelled(ApiError):
    """The request deadline elapsed before the message could be delivered."""

    pass


def error_response(exc: ApiError) -> JSONResponse:
    """Map an ApiError to its status code and response body.

    Args:
        exc: The error to report

    Returns:
        JSON response with the status code of the error kind
    """
    if isinstance(exc, MalformedRequest):
        code, body = status.HTTP_400_BAD_REQUEST, ApiJsonResponse(msg=exc.detail)
    elif isinstance(exc, ValidationFailed):
        code, body = 422, ApiJsonResponse(
            msg=VALIDATION_FAILED_MESSAGE, errors=exc.errors
        )
    elif isinstance(exc, DeliveryFailed):
        code, body = status.HTTP_500_INTERNAL_SERVER_ERROR, ApiJsonResponse(
            msg=DELIVERY_FAILED_MESSAGE
        )
    elif isinstance(exc, DeliveryCancelled):
        code, body = status.HTTP_503_SERVICE_UNAVAILABLE, ApiJsonResponse(
            msg=DELIVERY_CANCELLED_MESSAGE
        )
    else:
        raise TypeError(f"Unknown ApiError kind: {type(exc).__name__}")

    return JSONResponse(status_code=code, content=body.model_dump())


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc)
