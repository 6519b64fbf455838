"""Accessors for the process-scoped objects created in the application lifespan."""
from starlette.requests import HTTPConnection

from app.db.document_store import DocumentStore
from app.realtime.broadcaster import ChangeBroadcaster
from app.realtime.registry import SubscriberRegistry


def get_document_store(connection: HTTPConnection) -> DocumentStore:
    return connection.app.state.document_store


def get_subscriber_registry(connection: HTTPConnection) -> SubscriberRegistry:
    return connection.app.state.subscriber_registry


def get_broadcaster(connection: HTTPConnection) -> ChangeBroadcaster:
    return connection.app.state.broadcaster
