"""SQLAlchemy models for persisted document analyses."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JSONType(TypeDecorator):
    """Platform-independent JSON type.

    Uses JSONB for PostgreSQL and JSON for other databases (like SQLite).
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class AnalysisRecordModel(Base):
    """Document analysis table model."""
    __tablename__ = "document_analyses"

    document_id = Column(String(64), primary_key=True)
    deal_id = Column(String(128), nullable=True)
    filename = Column(String(255), nullable=False)
    document_type = Column(String(20), nullable=False)
    overall_score = Column(Integer, nullable=False)
    grade = Column(String(1), nullable=False)
    source_text = Column(Text, nullable=False, default="")
    payload = Column(JSONType, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_document_analyses_deal_id", "deal_id"),
        Index("idx_document_analyses_grade", "grade"),
    )
