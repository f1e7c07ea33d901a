import os

os.environ.setdefault("MESSAGE_FROM_EMAIL", "robot@studio.com")
os.environ.setdefault("MESSAGE_TO_EMAIL", "team@studio.com")
os.environ.setdefault("SMTP_ADDR", "smtp://smtp.studio.com:587")
os.environ.setdefault("SMTP_AUTH", "robot@studio.com:s3cr3t")
os.environ.setdefault("RETRY_COUNT", "3")
os.environ.setdefault("RETRY_TIMEOUT", "10")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from app.main import app
from app.api.dependencies import get_mail_service
from app.tests.fixtures.message import *


@pytest_asyncio.fixture(scope="function", loop_scope="function")
async def client(mail_service):
    """Fixture providing a TestClient with the mail service dependency overridden."""
    app.dependency_overrides[get_mail_service] = lambda: mail_service

    with TestClient(app) as c:
        yield c

    # Clean up overrides after the test finished
    app.dependency_overrides.clear()
