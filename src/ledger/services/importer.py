"""Transaction import service.

This module turns a CSV file into persisted transactions:
1. Read the file as a stream of rows
2. Drop incomplete rows and validate the rest
3. Resolve existing categories and create the missing ones
4. Link every row to its category
5. Persist all transactions and commit once
6. Delete the source file

Steps 3-5 run inside one database transaction. Any failure before the
commit rolls back and leaves the source file in place so the import can be
retried without duplicating categories or transactions.
"""

import logging
import time
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.config import Settings, get_settings
from ledger.core.exceptions import (
    CategoryResolutionError,
    PersistenceError,
    RowValidationError,
    TransactionImportError,
)
from ledger.models.category import Category
from ledger.models.transaction import Transaction
from ledger.parsers.csv_reader import is_complete, iter_csv_rows
from ledger.repositories.category import CategoryRepository
from ledger.repositories.transaction import TransactionDraft, TransactionRepository
from ledger.schemas.internal import CSVTransaction
from ledger.schemas.transaction import ImportResult

logger = logging.getLogger(__name__)


class ImportTransactionsService:
    """Service for importing transactions from CSV files.

    Store access is injected so tests can substitute in-memory fakes for
    the repositories.
    """

    def __init__(
        self,
        db: AsyncSession,
        categories: CategoryRepository | None = None,
        transactions: TransactionRepository | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the service.

        Args:
            db: Database session owning the import transaction
            categories: Category store (defaults to CategoryRepository(db))
            transactions: Transaction store (defaults to TransactionRepository(db))
            settings: Settings override (defaults to the cached settings)
        """
        self.db = db
        self.category_repo = categories or CategoryRepository(db)
        self.transaction_repo = transactions or TransactionRepository(db)
        self.settings = settings or get_settings()

    async def execute(self, path: str | Path) -> list[Transaction]:
        """Import ``path`` and return the persisted transactions."""
        result = await self.import_file(path)
        return result.transactions

    async def import_file(self, path: str | Path) -> ImportResult:
        """Import a CSV file of transactions.

        Args:
            path: Path to a CSV file with a header line and
                ``title,type,value,category`` data lines

        Returns:
            ImportResult with persisted transactions in input order

        Raises:
            SourceFileError: If the file cannot be read
            CSVFormatError: If the file is not valid delimited text
            RowValidationError: If a complete row has an invalid type or value
            CategoryResolutionError: If a row cannot be linked to a category
            PersistenceError: If the store rejects the import
        """
        start_time = time.time()
        path = Path(path)
        logger.info("Starting transaction import", extra={"path": str(path)})

        # Steps 1-2: the stream is fully consumed before touching the store
        rows, rows_read, rows_skipped = self._collect_rows(path)

        try:
            # Step 3: Resolve and create categories
            categories, created_titles = await self._resolve_categories(rows)

            # Step 4: Link rows to categories
            drafts = self._link_categories(rows, categories)

            # Step 5: Persist transactions and commit everything at once
            transactions = await self.transaction_repo.create_many(drafts) if drafts else []
            transaction_ids = [transaction.id for transaction in transactions]
            await self.db.commit()

        except TransactionImportError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self._log_failure("Import persistence failed", e)
            await self.db.rollback()
            raise PersistenceError("DB_001", {"path": str(path)}) from e
        except Exception as e:
            self._log_failure("Unexpected import failure", e)
            await self.db.rollback()
            raise

        # Commit expires loaded instances unless the session opts out; reload
        # them with their categories so the result stays usable
        if transaction_ids:
            transactions = await self.transaction_repo.get_by_ids(transaction_ids)

        # Step 6: Remove the source file only after a successful commit
        source_deleted = False
        if self.settings.delete_source_after_import:
            source_deleted = self._delete_source(path)

        logger.info(
            "Transaction import complete",
            extra={
                "path": str(path),
                "rows_read": rows_read,
                "rows_skipped": rows_skipped,
                "categories_created": len(created_titles),
                "transactions_count": len(transactions),
                "duration_ms": int((time.time() - start_time) * 1000),
            },
        )
        return ImportResult(
            transactions=transactions,
            created_categories=created_titles,
            rows_read=rows_read,
            rows_skipped=rows_skipped,
            source_deleted=source_deleted,
        )

    def _collect_rows(self, path: Path) -> tuple[list[CSVTransaction], int, int]:
        """Read, filter and validate every row of the file.

        Returns:
            Tuple of (accepted rows in input order, rows read, rows skipped)
        """
        accepted: list[CSVTransaction] = []
        rows_read = 0
        rows_skipped = 0

        for row in iter_csv_rows(
            path,
            encoding=self.settings.csv_encoding,
            delimiter=self.settings.csv_delimiter,
        ):
            rows_read += 1
            if not is_complete(row):
                rows_skipped += 1
                logger.debug("Skipping incomplete row", extra={"line": row.line})
                continue

            try:
                accepted.append(
                    CSVTransaction(
                        line=row.line,
                        title=row.title,
                        type=row.type,
                        value=row.value,
                        category=row.category,
                    )
                )
            except ValidationError as e:
                fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
                logger.warning(
                    "Rejected invalid row",
                    extra={"path": str(path), "line": row.line},
                )
                raise RowValidationError(
                    "VAL_001", {"line": row.line, "fields": fields}
                ) from e

        if rows_skipped:
            logger.info(
                "Skipped incomplete rows",
                extra={"path": str(path), "rows_skipped": rows_skipped},
            )
        return accepted, rows_read, rows_skipped

    async def _resolve_categories(
        self, rows: list[CSVTransaction]
    ) -> tuple[list[Category], list[str]]:
        """Fetch existing categories and create the missing ones.

        A uniqueness violation means a concurrent import created one of the
        titles first. Nothing else has been written in this transaction yet,
        so the session is rolled back and the lookup starts over.

        Returns:
            Tuple of (all categories referenced by rows, titles created)
        """
        titles = [row.category for row in rows]
        if not titles:
            return [], []

        attempts = max(1, self.settings.category_create_attempts)
        last_error: IntegrityError | None = None

        for attempt in range(1, attempts + 1):
            existing = await self.category_repo.find_by_titles(titles)
            existing_titles = {category.title for category in existing}
            # Exact-match dedup, first-seen order
            missing = list(dict.fromkeys(t for t in titles if t not in existing_titles))
            if not missing:
                return existing, []

            try:
                created = await self.category_repo.create_many(missing)
            except IntegrityError as e:
                logger.warning(
                    "Category creation conflicted with a concurrent import",
                    extra={"attempt": attempt},
                )
                await self.db.rollback()
                last_error = e
                continue

            logger.info(
                "Created categories", extra={"categories_created": len(created)}
            )
            return [*created, *existing], missing

        raise PersistenceError("DB_002", {"attempts": attempts}) from last_error

    def _link_categories(
        self, rows: list[CSVTransaction], categories: list[Category]
    ) -> list[TransactionDraft]:
        by_title = {category.title: category for category in categories}
        drafts = []
        for row in rows:
            category = by_title.get(row.category)
            if category is None:
                raise CategoryResolutionError(
                    "IMPORT_003", {"line": row.line, "category": row.category}
                )
            drafts.append(
                TransactionDraft(
                    title=row.title, type=row.type, value=row.value, category=category
                )
            )
        return drafts

    def _delete_source(self, path: Path) -> bool:
        # Data is already committed here; a failed delete is reported, not raised
        try:
            path.unlink()
        except OSError as e:
            logger.warning(
                "Could not delete imported file",
                extra={"path": str(path), "error_type": type(e).__name__},
            )
            return False
        return True

    def _log_failure(self, message: str, error: Exception) -> None:
        if self.settings.debug:
            logger.exception(message, extra={"error_type": type(error).__name__})
        else:
            logger.error(message, extra={"error_type": type(error).__name__})
