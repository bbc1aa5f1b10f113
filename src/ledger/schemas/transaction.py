"""Import result schemas."""

from pydantic import BaseModel, ConfigDict, Field

from ledger.models.transaction import Transaction


class ImportResult(BaseModel):
    """Outcome of importing one CSV file."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Persisted transactions in the order of accepted rows",
    )
    created_categories: list[str] = Field(
        default_factory=list, description="Titles of categories created by this import"
    )
    rows_read: int = Field(0, description="Data lines read (header excluded)")
    rows_skipped: int = Field(0, description="Rows dropped for missing title, type or value")
    source_deleted: bool = False

    @property
    def transactions_count(self) -> int:
        return len(self.transactions)
