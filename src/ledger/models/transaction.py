"""Transaction model representing a single income or outcome entry."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger.models.base import BaseModel


class Transaction(BaseModel):
    """Transaction model linked to exactly one category."""

    __tablename__ = "transactions"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id"), nullable=False, index=True
    )

    __table_args__ = (
        CheckConstraint("type IN ('income', 'outcome')", name="ck_transactions_type"),
    )

    # Relationships
    category: Mapped["Category"] = relationship("Category")

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, title={self.title}, type={self.type}, value={self.value})>"
