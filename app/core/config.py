"""Configuration settings for the Let's Start API.

This module manages environment variables and application settings.
"""
import logging
import os
import re
from typing import Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()

SMTP_AUTH_PATTERN = re.compile(r"^[^@]+@[^@]+\.[^@]+:.+$")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ValueError(f"{name} environment variable is not set")
    return value


def parse_smtp_addr(addr: str) -> Tuple[str, int, bool]:
    """Split an SMTP address into host, port and implicit-TLS flag.

    Accepts ``host:port`` as well as ``smtp://host:port`` and ``smtps://host:port``.

    Args:
        addr: The configured SMTP address

    Returns:
        Tuple of (hostname, port, use_tls)

    Raises:
        ValueError: If the address has no hostname or the scheme is unknown
    """
    if "://" not in addr:
        addr = f"smtp://{addr}"

    parsed = urlparse(addr)
    if parsed.scheme not in ("smtp", "smtps"):
        raise ValueError("must be a valid SMTP addr (e.g., smtp.gmail.com:587)")

    try:
        port = parsed.port
    except ValueError:
        raise ValueError("must be a valid SMTP addr (e.g., smtp.gmail.com:587)")

    if not parsed.hostname:
        raise ValueError("must be a valid SMTP addr (e.g., smtp.gmail.com:587)")

    use_tls = parsed.scheme == "smtps"
    if port is None:
        port = 465 if use_tls else 587

    return parsed.hostname, port, use_tls


def parse_smtp_auth(auth: str) -> Tuple[str, str]:
    """Split an ``email:password`` auth string into username and password."""
    if not SMTP_AUTH_PATTERN.match(auth):
        raise ValueError("must be a valid auth string (e.g., email:password)")
    username, password = auth.split(":", 1)
    return username, password


class Settings:
    """Application settings.

    Attributes:
        API_V1_STR: API version path prefix
        PROJECT_NAME: Name of the project
        DEBUG: Debug mode flag
        LOG_LEVEL: Root logging level name
        ALLOW_CORS_ORIGINS: Origins allowed to call the API from a browser
        MESSAGE_FROM_EMAIL: Sender address of the notification email
        MESSAGE_TO_EMAIL: Recipient address of the notification email
        RETRY_COUNT: Extra delivery attempts after the first one fails
        RETRY_TIMEOUT: Delay between delivery attempts, in msec
        SMTP_ADDR: SMTP relay address
        SMTP_AUTH: SMTP credentials as ``email:password``
        SMTP_CONNECTION_TIMEOUT: SMTP connection timeout, in msec
        REQUEST_TIMEOUT: Deadline for delivering one message, in seconds
    """
    def __init__(self):
        self.API_V1_STR = "/api/v1"
        self.PROJECT_NAME = "Let's Start API"
        self.DEBUG = os.getenv("DEBUG", "False").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        if not isinstance(getattr(logging, self.LOG_LEVEL.upper(), None), int):
            raise ValueError(f"LOG_LEVEL {self.LOG_LEVEL!r} is not a valid logging level")

        # CORS Settings
        self.ALLOW_CORS_ORIGINS = [
            origin.strip()
            for origin in os.getenv("ALLOW_CORS_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]
        if not self.ALLOW_CORS_ORIGINS:
            raise ValueError("ALLOW_CORS_ORIGINS must be at least one of the allowed origins")
        for origin in self.ALLOW_CORS_ORIGINS:
            parsed = urlparse(origin)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"ALLOW_CORS_ORIGINS must be a valid URLs, got {origin!r}")

        # Message Settings
        self.MESSAGE_FROM_EMAIL = _require_env("MESSAGE_FROM_EMAIL")
        self.MESSAGE_TO_EMAIL = _require_env("MESSAGE_TO_EMAIL")

        # Retry Settings
        self.RETRY_COUNT = _int_env("RETRY_COUNT", 3)
        if not 1 <= self.RETRY_COUNT <= 10:
            raise ValueError("RETRY_COUNT must be between 1 and 10 times")

        self.RETRY_TIMEOUT = _int_env("RETRY_TIMEOUT", 50)
        if not 10 <= self.RETRY_TIMEOUT <= 100:
            raise ValueError("RETRY_TIMEOUT must be between 10 and 100 msec")

        # SMTP Settings
        self.SMTP_ADDR = _require_env("SMTP_ADDR")
        try:
            parse_smtp_addr(self.SMTP_ADDR)
        except ValueError as e:
            raise ValueError(f"SMTP_ADDR {e}")

        self.SMTP_AUTH = _require_env("SMTP_AUTH")
        try:
            parse_smtp_auth(self.SMTP_AUTH)
        except ValueError as e:
            raise ValueError(f"SMTP_AUTH {e}")

        self.SMTP_CONNECTION_TIMEOUT = _int_env("SMTP_CONNECTION_TIMEOUT", 5000)
        if self.SMTP_CONNECTION_TIMEOUT < 1000:
            raise ValueError("SMTP_CONNECTION_TIMEOUT must be at least 1000 msec")

        self.REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))
        if self.REQUEST_TIMEOUT <= 0:
            raise ValueError("REQUEST_TIMEOUT must be greater than 0 seconds")

        # Slack Settings
        self.SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN")
        self.SLACK_ALERT_CHANNEL = os.getenv("SLACK_ALERT_CHANNEL", "#lets-start-alerts")


settings = Settings()
