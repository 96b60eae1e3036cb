"""Tests for SlackNotificationService."""

from unittest.mock import AsyncMock

import pytest

from core.domain.value_objects import ExecutionID
from core.infrastructure.adapters.notifications.slack_notification_service import SlackNotificationService
from core.settings.sections.integrations import SlackSettings


def test_build_payload():
    payload = SlackNotificationService.build_payload("hello", "danger")

    assert payload == {"attachments": [{"color": "danger", "text": "hello", "mrkdwn_in": ["text"]}]}


@pytest.mark.asyncio
async def test_error_message_format(monkeypatch):
    service = SlackNotificationService(SlackSettings(enabled=True, webhook_url="https://hooks.example/x"))
    sent = AsyncMock()
    monkeypatch.setattr(service, "_send_message", sent)
    execution_id = ExecutionID.generate()

    await service.send_error(execution_id, "order 1 / provision_hosting#2", "ProviderError: down", "Retries exhausted")

    text = sent.await_args.args[0]
    assert text.startswith("[HOSTFLOW] ❌ *Error*")
    assert f"`{execution_id}`" in text
    assert "Details: Retries exhausted" in text
    assert sent.await_args.kwargs == {"color": "danger"}


@pytest.mark.asyncio
async def test_disabled_service_does_not_post(monkeypatch):
    service = SlackNotificationService(SlackSettings(enabled=False, webhook_url="https://hooks.example/x"))

    def fail(*args, **kwargs):
        raise AssertionError("no HTTP session expected")

    monkeypatch.setattr("aiohttp.ClientSession", fail)

    await service.notify("hello", severity=90)
