"""Process-scoped set of live-update subscribers.

Empty at startup, drained by ``close_all()`` at shutdown. Membership changes never touch
the document store's write lock, and ``live_set()`` hands out a snapshot so a publish can
iterate while subscribers come and go.
"""
import logging
from typing import FrozenSet, Set

from app.core.exceptions import DeliveryError
from app.realtime.events import ConnectedMessage
from app.realtime.subscribers import Subscriber, deliver

logger = logging.getLogger(__name__)


class SubscriberRegistry:
    def __init__(self, send_timeout: float = 5.0) -> None:
        self._subscribers: Set[Subscriber] = set()
        self._send_timeout = send_timeout

    def __len__(self) -> int:
        return len(self._subscribers)

    def __contains__(self, subscriber: object) -> bool:
        return subscriber in self._subscribers

    async def register(self, subscriber: Subscriber) -> None:
        """Send the subscriber, and only it, the connected acknowledgment, then add it to the live set.

        Acknowledging first means no broadcast can reach the subscriber ahead of the acknowledgment.
        """
        try:
            await deliver(subscriber, ConnectedMessage().model_dump_json(), self._send_timeout)
        except DeliveryError as e:
            logger.warning(f"Connected acknowledgment to {subscriber!r} failed: {e}")
            return
        self._subscribers.add(subscriber)
        logger.info(f"Client connected ({len(self._subscribers)} total)")

    def unregister(self, subscriber: Subscriber) -> None:
        if subscriber not in self._subscribers:
            return
        self._subscribers.discard(subscriber)
        logger.info(f"Client disconnected ({len(self._subscribers)} total)")

    def live_set(self) -> FrozenSet[Subscriber]:
        return frozenset(self._subscribers)

    async def close_all(self) -> None:
        subscribers = list(self._subscribers)
        self._subscribers.clear()
        for subscriber in subscribers:
            try:
                await subscriber.close()
            except Exception as e:
                logger.warning(f"Error closing {subscriber!r}: {e}")
        if subscribers:
            logger.info(f"Closed {len(subscribers)} subscriber connection(s)")
