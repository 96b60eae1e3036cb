"""
Redis Streams publisher for order lifecycle events.

Appends committed lifecycle events to a Redis Stream so external consumers
(reporting, CRM sync, ...) can follow orders without polling the database.
"""
import json
import logging
from typing import Dict, Iterable, Optional

import redis.asyncio as aioredis

from orchestration.bus import EventBusProtocol
from orchestration.events import Event


logger = logging.getLogger(__name__)

LIFECYCLE_EVENTS = (
    "order.created",
    "order.paid",
    "order.payment_failed",
    "order.approved",
    "order.activated",
    "order.provisioning_reverted",
    "order.suspended",
    "order.reactivated",
    "order.cancelled",
)


class RedisStreamPublisher:
    """
    Publishes events to a Redis Stream.

    Stream format: hostflow:orders:stream
    Message format: {
        "event": str,            # e.g. "order.paid"
        "execution_id": str,
        "service": str,
        "timestamp": str,        # ISO format, UTC
        "payload": str,          # JSON
    }
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        stream_name: str = "hostflow:orders:stream",
        maxlen: int = 10000,
        client: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize Redis Stream Publisher.

        Args:
            redis_url: Redis connection URL
            stream_name: Redis Stream name
            maxlen: Approximate stream length cap
            client: Pre-built client (tests)
        """
        self.redis_url = redis_url
        self.stream_name = stream_name
        self.maxlen = maxlen
        self._redis_client = client

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self._redis_client is None:
            try:
                self._redis_client = aioredis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis_client.ping()
                logger.info(f"✅ Connected to Redis: {self.redis_url}")
            except aioredis.RedisError as e:
                self._redis_client = None
                logger.error(f"Failed to connect to Redis: {e}")
                raise

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None
            logger.info("✅ Disconnected from Redis")

    @staticmethod
    def to_message(event: Event) -> Dict[str, str]:
        return {
            "event": event.name,
            "execution_id": event.metadata.execution_id,
            "service": event.metadata.service,
            "timestamp": event.metadata.timestamp.isoformat(),
            "payload": json.dumps(event.payload, default=str),
        }

    async def publish(self, event: Event) -> str:
        """
        Append an event to the stream.

        Returns:
            Message ID from Redis Stream
        """
        if self._redis_client is None:
            await self.connect()

        msg_id = await self._redis_client.xadd(
            self.stream_name,
            self.to_message(event),
            maxlen=self.maxlen,
            approximate=True,
        )
        logger.info(f"[{event.metadata.execution_id}] ✅ {event.name} → {self.stream_name} ({msg_id})")
        return msg_id

    def attach(self, event_bus: EventBusProtocol, event_names: Iterable[str] = LIFECYCLE_EVENTS) -> None:
        """Subscribe to lifecycle events on the in-process bus."""
        for name in event_names:
            event_bus.subscribe(name, self.publish)

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
