import json
from typing import AsyncGenerator, Callable, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.dependencies import get_broadcaster, get_document_store, get_subscriber_registry
from app.db.document_store import DocumentStore
from app.db.schema_check import ensure_tables
from app.main import app
from app.realtime.broadcaster import ChangeBroadcaster
from app.realtime.registry import SubscriberRegistry


class FakeSubscriber:
    """In-memory subscriber handle recording every payload it is sent."""

    def __init__(self, fail: bool = False, on_send: Optional[Callable[["FakeSubscriber"], None]] = None) -> None:
        self.messages: List[str] = []
        self.is_live = True
        self.closed = False
        self.fail = fail
        self.on_send = on_send

    async def send_text(self, data: str) -> None:
        if self.on_send is not None:
            self.on_send(self)
        if self.fail:
            raise ConnectionResetError("connection reset by peer")
        self.messages.append(data)

    async def close(self) -> None:
        self.closed = True
        self.is_live = False

    def decoded(self) -> List[dict]:
        return [json.loads(m) for m in self.messages]


@pytest.fixture()
async def document_store(tmp_path) -> AsyncGenerator[DocumentStore, None]:
    """Store backed by a fresh SQLite file per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False, future=True)
    await ensure_tables(engine)
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield DocumentStore(session_factory, key="test")
    await engine.dispose()


@pytest.fixture()
def subscriber_registry() -> SubscriberRegistry:
    return SubscriberRegistry(send_timeout=1.0)


@pytest.fixture()
def broadcaster(subscriber_registry: SubscriberRegistry) -> ChangeBroadcaster:
    return ChangeBroadcaster(subscriber_registry, send_timeout=1.0)


@pytest.fixture()
def make_subscriber() -> Callable[..., FakeSubscriber]:
    return FakeSubscriber


@pytest.fixture()
async def listener(subscriber_registry: SubscriberRegistry) -> FakeSubscriber:
    """A registered subscriber with the connected acknowledgment already consumed."""
    subscriber = FakeSubscriber()
    await subscriber_registry.register(subscriber)
    subscriber.messages.clear()
    return subscriber


@pytest.fixture()
async def client(
    document_store: DocumentStore,
    subscriber_registry: SubscriberRegistry,
    broadcaster: ChangeBroadcaster,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app with test store and broadcaster."""
    app.dependency_overrides[get_document_store] = lambda: document_store
    app.dependency_overrides[get_subscriber_registry] = lambda: subscriber_registry
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
