"""Suspend / reactivate a hosting subscription when an order is suspended or reactivated."""
import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import IHostingGateway
from orchestration.models import ExecutionContext

from .base import FulfillmentUseCase


logger = logging.getLogger(__name__)


class SuspendHostingUseCase(FulfillmentUseCase):
    """Handler for `suspend_hosting` tasks."""

    def __init__(self, session_factory: async_sessionmaker, hosting: IHostingGateway, **kwargs) -> None:
        super().__init__(session_factory, **kwargs)
        self._hosting = hosting

    async def execute(self, ctx: ExecutionContext) -> str:
        subscription_ref = str(ctx.payload["subscription_ref"])
        await self._hosting.suspend_subscription(subscription_ref)
        logger.info(f"{ctx.log_prefix} suspended subscription {subscription_ref}")
        return subscription_ref


class ReactivateHostingUseCase(FulfillmentUseCase):
    """Handler for `reactivate_hosting` tasks."""

    def __init__(self, session_factory: async_sessionmaker, hosting: IHostingGateway, **kwargs) -> None:
        super().__init__(session_factory, **kwargs)
        self._hosting = hosting

    async def execute(self, ctx: ExecutionContext) -> str:
        subscription_ref = str(ctx.payload["subscription_ref"])
        await self._hosting.reactivate_subscription(subscription_ref)
        logger.info(f"{ctx.log_prefix} reactivated subscription {subscription_ref}")
        return subscription_ref
