"""Data models for the send-message API.

This module contains the Pydantic models for the "let's start a project" form,
both its raw wire shape and the rule-checked form, plus the response envelope
shared by every outcome of the endpoint.
"""

from typing import Dict, List, Optional
from typing_extensions import Annotated
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError

INCORRECT_EMAIL_MESSAGE = "Incorrect @mail address"
OUT_OF_RANGE_MESSAGE = "The value of the field goes out of range"
OUT_OF_BOUNDS_MESSAGE = "The length of the field goes out of bounds"

# pydantic error type -> message reported to the client
RULE_MESSAGES: Dict[str, str] = {
    "value_error": INCORRECT_EMAIL_MESSAGE,
    "greater_than_equal": OUT_OF_RANGE_MESSAGE,
    "less_than": OUT_OF_RANGE_MESSAGE,
    "less_than_equal": OUT_OF_RANGE_MESSAGE,
    "string_too_short": OUT_OF_BOUNDS_MESSAGE,
    "string_too_long": OUT_OF_BOUNDS_MESSAGE,
}


def _check_email(value: str) -> str:
    """Accept a bare email address and keep it exactly as submitted."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(INCORRECT_EMAIL_MESSAGE)
    return value


class LetsStartPayload(BaseModel):
    """Structural shape of the request body, before any business rule.

    Types are strict: numeric strings and booleans are not accepted as budgets.
    """

    email: str
    min_budget: Annotated[int, Field(..., alias="minBudget")]
    max_budget: Annotated[int, Field(..., alias="maxBudget")]
    name: str
    project_description: Annotated[str, Field(..., alias="projectDescription")]

    model_config = ConfigDict(populate_by_name=True, strict=True)


class LetsStartForm(BaseModel):
    """A validated project request.

    Attributes:
        email: Address to reply to
        min_budget: Lower budget bound, in [1000, 50000)
        max_budget: Upper budget bound, in [1000, 50000]
        name: Name of the person, 2 to 32 characters
        project_description: Free text, 64 to 512 characters
    """

    email: Annotated[
        str, AfterValidator(_check_email), Field(..., description="Address to reply to")
    ]
    min_budget: Annotated[
        int, Field(..., alias="minBudget", ge=1_000, lt=50_000, description="Lower budget bound")
    ]
    max_budget: Annotated[
        int, Field(..., alias="maxBudget", ge=1_000, le=50_000, description="Upper budget bound")
    ]
    name: Annotated[str, Field(..., min_length=2, max_length=32, description="Name of the person")]
    project_description: Annotated[
        str,
        Field(
            ...,
            alias="projectDescription",
            min_length=64,
            max_length=512,
            description="What the project is about",
        ),
    ]

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class FieldError(BaseModel):
    """Every rule violation of a single field."""

    field: str
    messages: List[str]


class ApiJsonResponse(BaseModel):
    """Response body of the API, for success and failure alike."""

    msg: str = Field(..., description="Human readable outcome")
    errors: Optional[List[FieldError]] = Field(None, description="Field errors of a rejected form")


def field_errors_from(exc: ValidationError) -> List[FieldError]:
    """Group pydantic errors of ``LetsStartForm`` by field, in declaration order.

    Args:
        exc: The error raised while validating a LetsStartForm

    Returns:
        One FieldError per failing field, using the wire (camelCase) field name
    """
    wire_names = {}
    for name, info in LetsStartForm.model_fields.items():
        wire_name = info.alias or name
        wire_names[name] = wire_name
        wire_names[wire_name] = wire_name

    grouped: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        wire_name = wire_names.get(str(loc[0]), str(loc[0]))
        grouped.setdefault(wire_name, []).append(
            RULE_MESSAGES.get(error["type"], error["msg"])
        )

    ordered = [wire for wire in dict.fromkeys(wire_names.values()) if wire in grouped]
    ordered += [wire for wire in grouped if wire not in ordered]
    return [FieldError(field=wire, messages=grouped[wire]) for wire in ordered]
