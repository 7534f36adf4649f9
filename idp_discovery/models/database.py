from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DiscoverySessionEntry(Base):
    """One session key/value pair, scoped to an opaque session id."""

    __tablename__ = "discovery_session_entries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(String(128), nullable=False)
    key = Column(String(255), nullable=False)
    value = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        UniqueConstraint("session_id", "key", name="uq_discovery_session_entries_session_key"),
        Index("idx_discovery_session_entries_session_id", "session_id"),
    )

    def __repr__(self) -> str:
        return f"<DiscoverySessionEntry session_id={self.session_id!r} key={self.key!r}>"
