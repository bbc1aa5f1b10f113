"""Internal data schemas for parsed CSV data.

These models represent rows accepted from an import file before they are
linked to categories and persisted.
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class CSVTransaction(BaseModel):
    """A single accepted CSV row.

    Values are kept as ``Decimal`` exactly as written in the file; no
    rounding or balance checks are applied.
    """

    line: int = Field(..., description="1-based line number in the source file")
    title: str = Field(..., description="Transaction title")
    type: Literal["income", "outcome"] = Field(..., description="'income' or 'outcome'")
    value: Decimal = Field(..., description="Transaction value")
    category: str = Field(..., description="Category title (exact, case-sensitive)")

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        """Ensure title is not empty."""
        if not v or not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("value")
    @classmethod
    def value_is_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Value must be a finite number")
        return v
