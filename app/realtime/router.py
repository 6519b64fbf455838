"""Live-update WebSocket endpoint. Inbound client messages are ignored."""
from fastapi import APIRouter, Depends, WebSocket

from app.core.dependencies import get_subscriber_registry
from app.realtime.registry import SubscriberRegistry
from app.realtime.subscribers import WebSocketSubscriber

router = APIRouter(tags=["realtime"])


@router.websocket("/")
@router.websocket("/ws")
async def subscribe(
    websocket: WebSocket,
    registry: SubscriberRegistry = Depends(get_subscriber_registry),
) -> None:
    await websocket.accept()
    subscriber = WebSocketSubscriber(websocket)
    await registry.register(subscriber)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        registry.unregister(subscriber)
