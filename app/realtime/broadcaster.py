"""Fan-out of committed changes to every live subscriber.

Delivery is best-effort per subscriber: a failed, timed-out or stale handle is dropped from
the registry and never affects the other deliveries or the mutation that triggered the event.
"""
import asyncio
import logging

from app.core.exceptions import DeliveryError
from app.realtime.events import ChangeEvent
from app.realtime.registry import SubscriberRegistry
from app.realtime.subscribers import Subscriber, deliver

logger = logging.getLogger(__name__)


class ChangeBroadcaster:
    def __init__(self, registry: SubscriberRegistry, send_timeout: float = 5.0) -> None:
        self._registry = registry
        self._send_timeout = send_timeout

    async def publish(self, event: ChangeEvent) -> int:
        """Serialize once and send to the current live set. Returns the number of successful deliveries."""
        payload = event.to_message().model_dump_json()
        subscribers = self._registry.live_set()
        if not subscribers:
            return 0
        results = await asyncio.gather(*(self._deliver(subscriber, payload) for subscriber in subscribers))
        delivered = sum(results)
        logger.debug(f"Published {event.kind.value} event to {delivered}/{len(subscribers)} subscriber(s)")
        return delivered

    async def _deliver(self, subscriber: Subscriber, payload: str) -> bool:
        try:
            await deliver(subscriber, payload, self._send_timeout)
            return True
        except DeliveryError as e:
            logger.warning(f"Dropping subscriber {subscriber!r}: {e}")
            self._registry.unregister(subscriber)
            await self._close(subscriber)
            return False

    async def _close(self, subscriber: Subscriber) -> None:
        """Close a dropped subscriber so its client sees the disconnect and can reconnect."""
        try:
            await asyncio.wait_for(subscriber.close(), timeout=self._send_timeout)
        except Exception as e:
            logger.warning(f"Error closing {subscriber!r}: {e}")
