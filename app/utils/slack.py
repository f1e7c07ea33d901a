import asyncio
from typing import Optional

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from app.core.config import settings

import logging

# Setup logging for Slack alerts
logger = logging.getLogger(__name__)


def send_slack_alert(message, title=None, token=None, channel=None):
    """Send alert to Slack with optional title."""
    token = token or settings.SLACK_BOT_TOKEN
    if not token:
        logger.warning(f"SLACK_BOT_TOKEN is not set, alert not sent: {title or message}")
        return

    try:
        client = WebClient(token=token)

        # Format message with title if provided
        formatted_message = f"*{title}*\n{message}" if title else message

        client.chat_postMessage(
            channel=channel or settings.SLACK_ALERT_CHANNEL,
            text=formatted_message,
            mrkdwn=True
        )
        logger.info(f"Slack alert sent: {message}")
    except SlackApiError as e:
        logger.error(f"Slack alert failed: {e.response['error']}")
    except Exception as e:
        logger.error(f"Error sending Slack alert: {str(e)}")


class SlackAlertSink:
    """Records failures in the Slack alert channel without blocking the caller."""

    def __init__(self, token: Optional[str] = None, channel: Optional[str] = None):
        self.token = token
        self.channel = channel

    def report(self, error_kind: str, detail: str) -> None:
        """Post one alert in the background.

        Args:
            error_kind: Name of the failure, used as the alert title
            detail: Description of the underlying error
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            send_slack_alert(detail, title=error_kind, token=self.token, channel=self.channel)
            return

        loop.run_in_executor(
            None, send_slack_alert, detail, error_kind, self.token, self.channel
        )
