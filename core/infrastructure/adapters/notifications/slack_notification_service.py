"""
Slack Notification Service Implementation.

Sends notifications via Slack Webhook API.
"""
import asyncio
import logging
from typing import Optional

import aiohttp

from core.application.interfaces import INotificationService
from core.domain.value_objects import ExecutionID
from core.settings.sections.integrations import SlackSettings


logger = logging.getLogger(__name__)


class SlackNotificationService(INotificationService):
    """
    Slack implementation of notification service.

    Delivery problems are logged and never raised: a notification must not
    change the outcome of the task that triggered it.
    """

    def __init__(self, settings: SlackSettings):
        """
        Initialize Slack notification service.

        Args:
            settings: Slack settings with webhook URL
        """
        self.settings = settings
        self.webhook_url = settings.webhook_url
        self.prefix = settings.prefix
        logger.info("SlackNotificationService initialized")

    async def send_success(
        self,
        execution_id: ExecutionID,
        reference: str,
        message: str
    ) -> None:
        """Send success notification via Slack."""
        text = (
            f"{self.prefix} ✅ *Success*\n"
            f"Execution: `{execution_id}`\n"
            f"Reference: `{reference}`\n"
            f"Message: {message}"
        )
        await self._send_message(text, color="good")

    async def send_error(
        self,
        execution_id: ExecutionID,
        reference: str,
        error: str,
        details: Optional[str]
    ) -> None:
        """Send error notification via Slack."""
        text = (
            f"{self.prefix} ❌ *Error*\n"
            f"Execution: `{execution_id}`\n"
            f"Reference: `{reference}`\n"
            f"Error: {error}\n"
        )
        if details:
            text += f"Details: {details}"
        await self._send_message(text, color="danger")

    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        color = "danger" if severity >= 80 else "warning" if severity >= 50 else "good"
        await self._send_message(f"{self.prefix} {message}", color=color)

    @staticmethod
    def build_payload(text: str, color: str) -> dict:
        return {
            "attachments": [
                {
                    "color": color,
                    "text": text,
                    "mrkdwn_in": ["text"],
                }
            ]
        }

    async def _send_message(self, text: str, color: str = "good") -> None:
        if not self.settings.enabled or not self.webhook_url:
            logger.warning("Slack notifications disabled or webhook_url not configured, skipping")
            return

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.webhook_url, json=self.build_payload(text, color)) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Slack API error: {response.status} - {error_text}")
                    else:
                        logger.info("Slack notification sent successfully")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to send Slack notification: {e}", exc_info=True)
