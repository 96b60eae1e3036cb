"""Message bus infrastructure - Redis Streams integration."""
from .redis_stream_publisher import LIFECYCLE_EVENTS, RedisStreamPublisher

__all__ = [
    "LIFECYCLE_EVENTS",
    "RedisStreamPublisher",
]
