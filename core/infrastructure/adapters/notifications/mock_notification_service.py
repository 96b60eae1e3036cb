"""
Mock Notification Service Implementation.

Records notifications instead of sending them; used in development and tests.
"""
import logging
from typing import Optional

from core.application.interfaces import INotificationService
from core.domain.value_objects import ExecutionID


logger = logging.getLogger(__name__)


class MockNotificationService(INotificationService):
    """Logs notifications and keeps them in `notifications_sent`."""

    def __init__(self):
        self.notifications_sent = []

    async def send_success(
        self,
        execution_id: ExecutionID,
        reference: str,
        message: str
    ) -> None:
        self.notifications_sent.append({
            "type": "success",
            "execution_id": str(execution_id),
            "reference": reference,
            "message": message,
        })
        logger.info(f"✅ 🔔 [{execution_id}] {reference}: {message}")

    async def send_error(
        self,
        execution_id: ExecutionID,
        reference: str,
        error: str,
        details: Optional[str]
    ) -> None:
        self.notifications_sent.append({
            "type": "error",
            "execution_id": str(execution_id),
            "reference": reference,
            "error": error,
            "details": details,
        })
        logger.error(f"❌ 🔔 [{execution_id}] {reference}: {error} ({details})")

    async def notify(self, message: str, severity: int = 50) -> None:
        self.notifications_sent.append({"type": "generic", "message": message, "severity": severity})
        severity_emoji = "🔴" if severity >= 80 else "🟡" if severity >= 50 else "🟢"
        logger.info(f"{severity_emoji} 🔔 NOTIFICATION (severity={severity}): {message}")

    def of_type(self, kind: str) -> list:
        return [n for n in self.notifications_sent if n["type"] == kind]

    def clear(self) -> None:
        self.notifications_sent.clear()
