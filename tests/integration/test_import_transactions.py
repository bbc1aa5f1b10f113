"""End-to-end import tests against a SQLite database."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.exceptions import PersistenceError, SourceFileError
from ledger.models.category import Category
from ledger.models.transaction import Transaction
from ledger.repositories.category import CategoryRepository
from ledger.repositories.transaction import TransactionRepository
from ledger.services.importer import ImportTransactionsService

from conftest import SCENARIO_CSV


async def count(session_factory, model) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return int(result.scalar_one())


class TestImportTransactions:
    @pytest.mark.asyncio
    async def test_scenario(self, session_factory, test_settings, write_csv):
        path = write_csv(SCENARIO_CSV)

        async with session_factory() as session:
            result = await ImportTransactionsService(session, settings=test_settings).import_file(path)

        assert await count(session_factory, Category) == 2
        assert await count(session_factory, Transaction) == 3
        first, _, third = result.transactions
        assert third.category_id == first.category_id
        assert not path.exists()

        async with session_factory() as session:
            rows = await session.execute(
                select(Transaction.title, Category.title).join(Category)
            )
            assert sorted(tuple(row) for row in rows.all()) == [
                ("Bus", "Transport"),
                ("Bus", "Transport"),
                ("Salary", "Salary"),
            ]

    @pytest.mark.asyncio
    async def test_reimport_creates_no_new_categories(
        self, session_factory, test_settings, write_csv
    ):
        async with session_factory() as session:
            await ImportTransactionsService(session, settings=test_settings).import_file(
                write_csv(SCENARIO_CSV, "first.csv")
            )
        async with session_factory() as session:
            result = await ImportTransactionsService(session, settings=test_settings).import_file(
                write_csv(SCENARIO_CSV, "second.csv")
            )

        assert result.created_categories == []
        assert await count(session_factory, Category) == 2
        assert await count(session_factory, Transaction) == 6

    @pytest.mark.asyncio
    async def test_missing_file_leaves_store_empty(self, session_factory, test_settings, tmp_path):
        async with session_factory() as session:
            with pytest.raises(SourceFileError):
                await ImportTransactionsService(session, settings=test_settings).import_file(
                    tmp_path / "missing.csv"
                )

        assert await count(session_factory, Category) == 0
        assert await count(session_factory, Transaction) == 0

    @pytest.mark.asyncio
    async def test_failed_transactions_roll_back_new_categories(
        self, session_factory, test_settings, write_csv
    ):
        class FailingTransactionRepository(TransactionRepository):
            async def create_many(self, drafts):
                await super().create_many(drafts)
                raise OperationalError("INSERT INTO transactions", {}, Exception("disk I/O error"))

        path = write_csv(SCENARIO_CSV)
        async with session_factory() as session:
            service = ImportTransactionsService(
                session,
                transactions=FailingTransactionRepository(session),
                settings=test_settings,
            )
            with pytest.raises(PersistenceError):
                await service.import_file(path)

        assert await count(session_factory, Category) == 0
        assert await count(session_factory, Transaction) == 0
        assert path.exists()

        # Retrying the same file afterwards succeeds without duplicates
        async with session_factory() as session:
            await ImportTransactionsService(session, settings=test_settings).import_file(path)

        assert await count(session_factory, Category) == 2
        assert await count(session_factory, Transaction) == 3

    @pytest.mark.asyncio
    async def test_concurrent_category_creation_is_refetched(
        self, session_factory, test_settings, write_csv
    ):
        class StaleReadRepository(CategoryRepository):
            """First lookup misses a category another importer commits meanwhile."""

            stale = True

            async def find_by_titles(self, titles):
                if self.stale:
                    self.stale = False
                    async with session_factory() as other:
                        other.add(Category(title="Transport"))
                        await other.commit()
                    return []
                return await super().find_by_titles(titles)

        async with session_factory() as session:
            service = ImportTransactionsService(
                session, categories=StaleReadRepository(session), settings=test_settings
            )
            result = await service.import_file(write_csv(SCENARIO_CSV))

        assert result.created_categories == ["Salary"]
        assert await count(session_factory, Category) == 2
        assert await count(session_factory, Transaction) == 3

    @pytest.mark.asyncio
    async def test_result_is_usable_with_expiring_session(
        self, test_engine, session_factory, test_settings, write_csv
    ):
        # Default AsyncSession expires instances on commit
        async with AsyncSession(test_engine) as session:
            result = await ImportTransactionsService(session, settings=test_settings).import_file(
                write_csv(SCENARIO_CSV)
            )

        first, second, third = result.transactions
        assert [t.title for t in result.transactions] == ["Bus", "Salary", "Bus"]
        assert first.id is not None
        assert first.created_at is not None
        assert first.category.title == "Transport"
        assert second.category.title == "Salary"
        assert third.category_id == first.category_id

        async with session_factory() as session:
            stored = await session.get(Transaction, first.id)
            assert stored.title == "Bus"

    @pytest.mark.asyncio
    async def test_empty_category_is_stored_as_empty_title(
        self, session_factory, test_settings, write_csv
    ):
        path = write_csv(
            "title,type,value,category\n"
            "Gift,income,20,\n"
            "Tip,income,3,\n"
        )

        async with session_factory() as session:
            result = await ImportTransactionsService(session, settings=test_settings).import_file(path)

        assert result.created_categories == [""]
        assert result.transactions[0].category_id == result.transactions[1].category_id

        async with session_factory() as session:
            titles = (await session.execute(select(Category.title))).scalars().all()
            assert titles == [""]
