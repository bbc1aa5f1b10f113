"""Category repository with title lookups and batch creation."""
from collections.abc import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.category import Category
from ledger.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def find_by_titles(self, titles: Iterable[str]) -> list[Category]:
        """Get all categories whose title is in ``titles``.

        Duplicates in ``titles`` are fine; matching is exact and case-sensitive.
        """
        unique_titles = sorted(set(titles))
        if not unique_titles:
            return []
        result = await self.db.execute(
            select(Category).where(Category.title.in_(unique_titles))
        )
        return list(result.scalars().all())

    async def get_by_title(self, title: str) -> Category | None:
        result = await self.db.execute(select(Category).where(Category.title == title))
        return result.scalar_one_or_none()

    async def create_many(self, titles: Sequence[str]) -> list[Category]:
        """
        Create one category per title in a single flush.
        Raises IntegrityError if any title already exists in the store.
        """
        return await self.add_all([Category(title=title) for title in titles])
