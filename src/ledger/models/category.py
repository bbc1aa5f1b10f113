"""Category model grouping transactions by title."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel


class Category(BaseModel):
    """Named category, unique by title."""

    __tablename__ = "categories"

    title: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, title={self.title})>"
