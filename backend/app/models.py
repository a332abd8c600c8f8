"""SQLAlchemy ORM models for the Money Routine backend.

Content is stored as JSON documents grouped by collection
(dashboards, routine_articles, page_articles, subscribers). Sorting and
filtering stay in the repository layer, so a single table is enough.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentRecord(Base):
    __tablename__ = "content_records"

    collection = Column(String(50), primary_key=True)
    key = Column(String(100), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
