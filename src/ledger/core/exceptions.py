"""Custom exception classes for transaction imports.

Each exception carries an error_code that maps to the catalog in errors.py.
"""

from typing import Any

from ledger.core.errors import get_user_message, is_retryable


class TransactionImportError(Exception):
    """Base exception for all transaction import errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "IMPORT_001")
        details: Additional context about the error (for logging)
    """

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py
            details: Additional error context (not shown to users)
        """
        self.error_code = error_code
        self.details = details or {}
        super().__init__(error_code)

    @property
    def retryable(self) -> bool:
        return is_retryable(self.error_code)

    @property
    def user_message(self) -> str:
        return get_user_message(self.error_code)


class SourceFileError(TransactionImportError):
    """Raised when the CSV file is missing or cannot be read (IMPORT_001)."""

    pass


class CSVFormatError(TransactionImportError):
    """Raised when the file cannot be decoded as delimited text (IMPORT_002)."""

    pass


class RowValidationError(TransactionImportError):
    """Raised when a complete row has an invalid type or value (VAL_001).

    The offending line number is available in details["line"].
    """

    pass


class CategoryResolutionError(TransactionImportError):
    """Raised when an accepted row has no resolved category (IMPORT_003).

    Every row's category is either pre-existing or created during the
    import, so this indicates a defect rather than bad input.
    """

    pass


class PersistenceError(TransactionImportError):
    """Raised when the store rejects the import (DB_001, DB_002)."""

    pass
