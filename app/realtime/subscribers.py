import asyncio
from typing import Protocol

from starlette.websockets import WebSocket, WebSocketState

from app.core.exceptions import DeliveryError


class Subscriber(Protocol):
    """A live-update handle owned by its transport. Compared and hashed by identity."""

    @property
    def is_live(self) -> bool: ...

    async def send_text(self, data: str) -> None: ...

    async def close(self) -> None: ...


class WebSocketSubscriber:
    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    @property
    def is_live(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, data: str) -> None:
        await self.websocket.send_text(data)

    async def close(self) -> None:
        if self.is_live:
            await self.websocket.close(code=1001)

    def __repr__(self) -> str:
        client = self.websocket.client
        return f"<WebSocketSubscriber {client.host}:{client.port}>" if client else "<WebSocketSubscriber>"


async def deliver(subscriber: Subscriber, payload: str, timeout: float) -> None:
    """Send one payload to one subscriber. Any failure, including a stale handle, is a DeliveryError."""
    if not subscriber.is_live:
        raise DeliveryError("subscriber is not connected")
    try:
        await asyncio.wait_for(subscriber.send_text(payload), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise DeliveryError(f"send timed out after {timeout}s") from e
    except Exception as e:
        raise DeliveryError(str(e) or e.__class__.__name__) from e
