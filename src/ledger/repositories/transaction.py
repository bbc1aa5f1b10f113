"""Transaction repository with batch creation and category queries."""
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ledger.models.category import Category
from ledger.models.transaction import Transaction
from ledger.repositories.base import BaseRepository

ID_CHUNK_SIZE = 500


@dataclass(frozen=True)
class TransactionDraft:
    """Transaction fields ready for persistence, linked to a resolved category."""

    title: str
    type: str
    value: Decimal
    category: Category


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def create_many(self, drafts: Sequence[TransactionDraft]) -> list[Transaction]:
        """Create all transactions in one flush, preserving input order."""
        return await self.add_all(
            [
                Transaction(
                    title=draft.title,
                    type=draft.type,
                    value=draft.value,
                    category=draft.category,
                )
                for draft in drafts
            ]
        )

    async def get_by_ids(self, ids: Sequence[UUID]) -> list[Transaction]:
        """Load transactions with their categories, in the order of ``ids``."""
        by_id: dict[UUID, Transaction] = {}
        # Chunked to stay under bound-parameter limits on large imports
        for start in range(0, len(ids), ID_CHUNK_SIZE):
            result = await self.db.execute(
                select(Transaction)
                .where(Transaction.id.in_(ids[start : start + ID_CHUNK_SIZE]))
                .options(selectinload(Transaction.category))
            )
            by_id.update((t.id, t) for t in result.scalars().all())
        return [by_id[id] for id in ids if id in by_id]

    async def get_by_category(self, category_id: UUID) -> list[Transaction]:
        """Get all transactions in a category, oldest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.category_id == category_id)
            .order_by(Transaction.created_at)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Transaction))
        return int(result.scalar_one())
