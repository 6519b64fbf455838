"""The single persisted aggregate: classes, students and attendance in one JSON payload."""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String

from app.db.session import Base


class StoredDocument(Base):
    """One row per deployment, keyed by DOCUMENT_KEY. Payload is replaced wholesale on every save."""

    __tablename__ = "documents"

    key = Column(String(100), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
