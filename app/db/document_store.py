"""Durable single-document store.

The whole dataset (classes, students, attendance) is one JSON payload in one row.
Every mutation is a whole-document read-modify-write run through ``transaction()``,
which holds a process-wide lock so two writers never interleave their load and save.
Reads call ``load()`` directly and may see a snapshot that predates an in-flight write.
"""
import asyncio
import copy
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import PersistenceError
from app.core.models import StoredDocument

logger = logging.getLogger(__name__)

Document = Dict[str, List[Dict[str, Any]]]

COLLECTIONS = ("classes", "students", "attendance")


def empty_document() -> Document:
    return {name: [] for name in COLLECTIONS}


def _normalize(payload: Any) -> Document:
    """Deep copy of the stored payload with every collection present."""
    document = copy.deepcopy(payload) if isinstance(payload, dict) else {}
    for name in COLLECTIONS:
        if not isinstance(document.get(name), list):
            document[name] = []
    return document


class DocumentStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        key: str = "default",
    ) -> None:
        self._session_factory = session_factory
        self._key = key
        self._write_lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> Document:
        """Current durable state. Persists and returns the empty document if none exists yet."""
        try:
            document = await self._read()
            if document is None:
                document = await self._initialize()
            return document
        except SQLAlchemyError as e:
            logger.error(f"Error reading document {self._key!r}: {e}")
            raise PersistenceError("Failed to read the data store") from e

    async def save(self, document: Document) -> None:
        """Overwrite the durable state. On failure the previous state stays intact."""
        payload = _normalize(document)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await self._write(session, payload)
        except SQLAlchemyError as e:
            logger.error(f"Error writing document {self._key!r}: {e}")
            raise PersistenceError("Failed to write the data store") from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Document]:
        """Load, yield for in-place mutation, then save. Nothing is saved if the body raises."""
        async with self._write_lock:
            document = await self.load()
            yield document
            await self.save(document)

    async def _read(self) -> Optional[Document]:
        async with self._session_factory() as session:
            row = await session.get(StoredDocument, self._key)
            if row is None:
                return None
            return _normalize(row.payload)

    async def _initialize(self) -> Document:
        document = empty_document()
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(StoredDocument(key=self._key, payload=copy.deepcopy(document)))
        except IntegrityError:
            # Lost the insert race to a concurrent first load.
            existing = await self._read()
            if existing is not None:
                return existing
            raise
        logger.info(f"Initialized empty document {self._key!r}")
        return document

    async def _write(self, session: AsyncSession, payload: Document) -> None:
        row = await session.get(StoredDocument, self._key)
        if row is None:
            session.add(StoredDocument(key=self._key, payload=payload))
        else:
            row.payload = payload
