"""Send-message endpoints for the Let's Start API.

This module contains the FastAPI routes relaying "let's start a project" form
submissions to the team inbox, plus a liveness probe.
"""

import asyncio
import logging
from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import get_mail_service
from app.api.json_request import (
    JSON_CONTENT_TYPE_MESSAGE,
    decode_and_validate,
    is_json_content_type,
)
from app.core.config import settings
from app.core.exceptions import DeliveryCancelled, MalformedRequest
from app.models.message import ApiJsonResponse
from app.services.mail_service import MailService

logger = logging.getLogger(__name__)

router = APIRouter()

MESSAGE_SENT = "Your message has been sent"
ALIVE = "I'm alive"


@router.get(
    "/alive",
    response_model=ApiJsonResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
)
async def alive() -> ApiJsonResponse:
    return ApiJsonResponse(msg=ALIVE)


@router.post(
    "/send-message",
    response_model=ApiJsonResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a project request",
    description="Validate a project request form and relay it by email. No authentication required.",
    responses={
        400: {"model": ApiJsonResponse, "description": "Body is not the expected JSON"},
        422: {"model": ApiJsonResponse, "description": "One or more fields are invalid"},
        500: {"model": ApiJsonResponse, "description": "The message could not be delivered"},
        503: {"model": ApiJsonResponse, "description": "Delivery did not finish in time"},
    },
)
async def send_message(
    http_request: Request, mail_service: MailService = Depends(get_mail_service)
) -> ApiJsonResponse:
    """
    Relay a project request to the team inbox.

    This endpoint:
    - Decodes the JSON body and checks every field rule
    - Sends the form as an email, retrying transient SMTP failures
    - Gives up when the request deadline elapses

    Args:
        http_request: FastAPI request object, read as raw bytes
        mail_service: The mail service (injected by get_mail_service)

    Returns:
        Confirmation that the message was sent

    Raises:
        MalformedRequest: If the body is not the expected JSON object
        ValidationFailed: If any field breaks its rules
        DeliveryFailed: If every delivery attempt failed
        DeliveryCancelled: If the deadline elapsed during delivery
    """
    if not is_json_content_type(http_request.headers.get("content-type")):
        raise MalformedRequest(JSON_CONTENT_TYPE_MESSAGE)

    form = decode_and_validate(await http_request.body())
    logger.info(f"Processing project request from {form.email}")

    try:
        await asyncio.wait_for(
            mail_service.send_message(form), timeout=settings.REQUEST_TIMEOUT
        )
    except asyncio.TimeoutError:
        logger.warning(
            f"Project request from {form.email} not delivered within {settings.REQUEST_TIMEOUT}s"
        )
        raise DeliveryCancelled()

    return ApiJsonResponse(msg=MESSAGE_SENT)
