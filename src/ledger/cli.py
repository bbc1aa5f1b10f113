"""Command-line entry point for importing a CSV file of transactions."""

import argparse
import asyncio
import json
import logging
import sys

from ledger.config import get_settings
from ledger.core.errors import get_suggestion
from ledger.core.exceptions import TransactionImportError
from ledger.core.logging import setup_logging
from ledger.db.session import build_engine, build_sessionmaker
from ledger.schemas.transaction import ImportResult
from ledger.services.importer import ImportTransactionsService

logger = logging.getLogger(__name__)


async def run_import(path: str, database_url: str, keep_file: bool = False) -> ImportResult:
    settings = get_settings()
    if keep_file:
        settings = settings.model_copy(update={"delete_source_after_import": False})

    engine = build_engine(database_url)
    try:
        async with build_sessionmaker(engine)() as session:
            service = ImportTransactionsService(session, settings=settings)
            return await service.import_file(path)
    finally:
        await engine.dispose()


def summarize(result: ImportResult) -> dict:
    return {
        "transactions": result.transactions_count,
        "categories_created": result.created_categories,
        "rows_read": result.rows_read,
        "rows_skipped": result.rows_skipped,
        "source_deleted": result.source_deleted,
    }


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Import transactions from a CSV file")
    parser.add_argument("path", help="CSV file with header: title,type,value,category")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy async database URL")
    parser.add_argument("--keep-file", action="store_true", help="Do not delete the file after a successful import")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--log-format", choices=["text", "json"], default=settings.log_format)

    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_format)

    try:
        result = asyncio.run(run_import(args.path, args.database_url, args.keep_file))
    except TransactionImportError as e:
        logger.error("Import failed", extra={"error_code": e.error_code})
        print(f"Error [{e.error_code}]: {e.user_message}", file=sys.stderr)
        print(get_suggestion(e.error_code), file=sys.stderr)
        return 1

    print(json.dumps(summarize(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
