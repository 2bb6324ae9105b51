"""Document model"""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """Document model - one JSON record of a named collection"""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Owner, copied out of the payload so queries can filter on it
    user_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False
    )

    __table_args__ = (
        Index("ix_documents_collection_user", "collection", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Document(collection={self.collection}, id={self.id}, user_id={self.user_id})>"
