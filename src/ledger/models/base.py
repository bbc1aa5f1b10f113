"""Declarative base for ledger tables.

Categories and transactions are insert-only from the importer's side, so
rows carry an identifier and an insertion timestamp but no update tracking.
"""
from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class BaseModel(Base):
    """Abstract ledger row: UUID key assigned client-side, UTC insert time."""

    __abstract__ = True

    # Assigned on flush, before commit, so a batch can be re-selected by id
    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
