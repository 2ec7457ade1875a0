"""Realtime broadcast of booking events over Redis pub/sub.

Publishing is fire-and-forget: it runs after the transaction has committed
and never raises. Subscribers (websocket gateways, dashboards) are outside
this service.
"""

import json
import logging
from datetime import date, datetime
from typing import Any
from uuid import UUID

import redis.asyncio as redis

from app.config import settings

logger = logging.getLogger(__name__)

BOOKING_CREATED = "booking:created"
BOOKING_STATUS_UPDATED = "booking:statusUpdated"
BOOKING_EQUIPMENT_UPDATED = "booking:equipmentUpdated"
BOOKING_PAID = "BOOKING_PAID"


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class EventPublisher:
    """Publish booking snapshots to the realtime channel."""

    def __init__(
        self,
        redis_url: str | None = None,
        channel: str | None = None,
        enabled: bool | None = None,
    ) -> None:
        self.redis_url = redis_url or settings.redis_url
        self.channel = channel or settings.realtime_channel
        self.enabled = settings.realtime_enabled if enabled is None else enabled
        self._redis: redis.Redis | None = None

    async def get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=settings.redis_socket_timeout,
                socket_connect_timeout=settings.redis_socket_timeout,
            )
        return self._redis

    async def publish(self, event: str, payload: dict[str, Any]) -> bool:
        """Publish one event; returns False instead of raising when the channel is down."""
        if not self.enabled:
            return False
        message = json.dumps({"event": event, "data": payload}, default=_json_default)
        try:
            client = await self.get_redis()
            await client.publish(self.channel, message)
            return True
        except (redis.RedisError, OSError) as e:
            logger.warning(f"Realtime publish of '{event}' failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


event_publisher = EventPublisher()
