"""
MailService Module

This module relays validated project requests as notification emails over
SMTP, retrying transient delivery failures with a fixed delay.
"""

import asyncio
import logging
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

import aiosmtplib
from pydantic import BaseModel, ConfigDict

from app.core.config import Settings, parse_smtp_addr, parse_smtp_auth
from app.core.exceptions import DeliveryFailed
from app.models.message import LetsStartForm

logger = logging.getLogger(__name__)

# Failures worth another attempt: SMTP replies, auth, connection and timeouts
TRANSIENT_ERRORS = (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError)


class AlertSink(Protocol):
    def report(self, error_kind: str, detail: str) -> None: ...


class MailConfig(BaseModel):
    """Read-only snapshot of everything the mail service needs."""

    from_address: str
    to_address: str
    smtp_host: str
    smtp_port: int
    use_tls: bool = False
    username: Optional[str] = None
    password: Optional[str] = None
    connect_timeout: float
    retry_count: int
    retry_timeout: float

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailConfig":
        """Build the snapshot from already validated settings.

        Timeouts are configured in msec and kept here in seconds.
        """
        host, port, use_tls = parse_smtp_addr(settings.SMTP_ADDR)
        username, password = parse_smtp_auth(settings.SMTP_AUTH)
        return cls(
            from_address=settings.MESSAGE_FROM_EMAIL,
            to_address=settings.MESSAGE_TO_EMAIL,
            smtp_host=host,
            smtp_port=port,
            use_tls=use_tls,
            username=username,
            password=password,
            connect_timeout=settings.SMTP_CONNECTION_TIMEOUT / 1000,
            retry_count=settings.RETRY_COUNT,
            retry_timeout=settings.RETRY_TIMEOUT / 1000,
        )


@dataclass
class RetryState:
    """Progress of one dispatch; never outlives a send_message call."""

    max_attempts: int
    delay: float
    attempt: int = 0

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts


class MailService:
    """Mail service relaying project requests to the configured inbox."""

    def __init__(self, config: MailConfig, alert_sink: AlertSink):
        self.config = config
        self.alert_sink = alert_sink

    def render_body(self, form: LetsStartForm) -> str:
        """Render the form fields as the plain-text email body."""
        return (
            f"Name: {form.name}\n"
            f"Email: {form.email}\n"
            f"Budget: {form.min_budget} - {form.max_budget}\n"
            f"\n"
            f"{form.project_description}\n"
        )

    def render_subject(self, form: LetsStartForm) -> str:
        """Render the subject line, with the name folded onto a single line."""
        name = " ".join(form.name.split())
        name = "".join(ch for ch in name if ch.isprintable())
        return f"New project request from {name}"

    def create_email_multipart_message(self, form: LetsStartForm) -> MIMEMultipart:
        """
        Creates the MIME message announcing a project request.

        Args:
            form: The validated project request

        Returns:
            MIMEMultipart: The constructed email message ready to be sent.
        """
        message = MIMEMultipart("mixed")
        message["Subject"] = self.render_subject(form)
        message["From"] = self.config.from_address
        message["To"] = self.config.to_address
        message["Reply-To"] = form.email
        message.attach(MIMEText(self.render_body(form), "plain", "utf-8"))
        return message

    async def send_mail(self, message: MIMEMultipart) -> None:
        """Make a single delivery attempt over SMTP."""
        await aiosmtplib.send(
            message,
            hostname=self.config.smtp_host,
            port=self.config.smtp_port,
            username=self.config.username,
            password=self.config.password,
            use_tls=self.config.use_tls,
            start_tls=None if self.config.use_tls else True,
            timeout=self.config.connect_timeout,
        )

    async def send_message(self, form: LetsStartForm) -> None:
        """
        Deliver the project request, retrying transient failures.

        The first attempt is followed by up to ``retry_count`` retries, each
        after a fixed ``retry_timeout`` pause.

        Args:
            form: The validated project request

        Raises:
            DeliveryFailed: When every attempt failed
        """
        message = self.create_email_multipart_message(form)
        state = RetryState(
            max_attempts=self.config.retry_count + 1, delay=self.config.retry_timeout
        )
        last_error: Optional[BaseException] = None

        while not state.exhausted:
            state.attempt += 1
            try:
                await self.send_mail(message)
                logger.info(f"Message from {form.email} sent to {self.config.to_address}")
                return
            except TRANSIENT_ERRORS as e:
                last_error = e
                logger.warning(
                    f"Send attempt {state.attempt}/{state.max_attempts} failed: {str(e)}"
                )
                if not state.exhausted:
                    await asyncio.sleep(state.delay)

        logger.error(
            f"Failed to send message from {form.email} after {state.attempt} attempts: {last_error}"
        )
        self.alert_sink.report("DeliveryFailed", str(last_error))
        raise DeliveryFailed(last_error)
