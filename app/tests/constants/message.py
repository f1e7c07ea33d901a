from enum import Enum


class MessageTestConstants(Enum):
    """Constants for project request data used in tests."""

    MOCK_EMAIL = "a@b.com"
    MOCK_NAME = "Ada"
    MOCK_MIN_BUDGET = 2_000
    MOCK_MAX_BUDGET = 3_000
    MOCK_PROJECT_DESCRIPTION = (
        "We need a small marketing site with a blog, a contact page and a "
        "simple admin area to publish posts."
    )
    MOCK_FROM_EMAIL = "robot@studio.com"
    MOCK_TO_EMAIL = "team@studio.com"
    MOCK_SMTP_USERNAME = "robot@studio.com"
    MOCK_SMTP_PASSWORD = "s3cr3t:with:colons"


MOCK_FORM_DATA = {
    "email": MessageTestConstants.MOCK_EMAIL.value,
    "minBudget": MessageTestConstants.MOCK_MIN_BUDGET.value,
    "maxBudget": MessageTestConstants.MOCK_MAX_BUDGET.value,
    "name": MessageTestConstants.MOCK_NAME.value,
    "projectDescription": MessageTestConstants.MOCK_PROJECT_DESCRIPTION.value,
}


def get_form_data(**overrides):
    """Generate request data for the send-message endpoint."""
    return {**MOCK_FORM_DATA, **overrides}
