from ledger.services.importer import ImportTransactionsService

__all__ = ["ImportTransactionsService"]
