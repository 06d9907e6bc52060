"""
Layerpost Backend — Post SQLAlchemy Model
==========================================

What:  ORM model for the `posts` table.
Who:   Handed to `Repository(Post, session)` by the route dependencies;
       registered on Base.metadata for table creation at startup.

Table Design:
    - id: UUID generated in Python, so the same model works on PostgreSQL and SQLite
    - title: short required headline
    - content: free text, empty string rather than NULL
    - author: optional display name
    - created_at / updated_at: UTC, timezone-aware
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """A single published post."""

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    author: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    # onupdate fires on every flush that changes the row
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Listing is newest-first
    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}')>"
