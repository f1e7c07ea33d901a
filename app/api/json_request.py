"""Decoding and validation of the send-message request body.

Decoding and validation are two separate steps so that a body which is not
the expected JSON object (``MalformedRequest``) is never confused with a form
that breaks field rules (``ValidationFailed``).
"""

from typing import Optional

from pydantic import ValidationError

from app.core.exceptions import MalformedRequest, ValidationFailed
from app.models.message import LetsStartForm, LetsStartPayload, field_errors_from

JSON_CONTENT_TYPE_MESSAGE = "Expected request with `Content-Type: application/json`"


def is_json_content_type(content_type: Optional[str]) -> bool:
    """Tell whether a Content-Type header denotes a JSON body."""
    if not content_type:
        return False
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime == "application/json" or (mime.startswith("application/") and mime.endswith("+json"))


def decode_payload(body: bytes) -> LetsStartPayload:
    """Decode the raw body into the request shape.

    Args:
        body: Raw request body, expected to be UTF-8 JSON

    Returns:
        The decoded payload, no business rule checked yet

    Raises:
        MalformedRequest: On a JSON syntax error or a shape/type mismatch
    """
    try:
        return LetsStartPayload.model_validate_json(body)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        syntax_errors = [err for err in errors if err["type"] == "json_invalid"]
        if syntax_errors:
            raise MalformedRequest(
                f"Failed to parse the request body as JSON: {syntax_errors[0]['msg']}"
            )

        first = errors[0]
        location = ".".join(str(part) for part in first["loc"]) or "body"
        raise MalformedRequest(
            f"Failed to deserialize the JSON body into the target type: {location}: {first['msg']}"
        )


def validate_payload(payload: LetsStartPayload) -> LetsStartForm:
    """Check every field rule of a decoded payload.

    Raises:
        ValidationFailed: With one FieldError per failing field
    """
    try:
        return LetsStartForm.model_validate(payload.model_dump())
    except ValidationError as e:
        raise ValidationFailed(field_errors_from(e))


def decode_and_validate(body: bytes) -> LetsStartForm:
    return validate_payload(decode_payload(body))
