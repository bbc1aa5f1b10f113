"""Error codes and user-friendly messages.

This module defines the error catalog for transaction imports.
Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

# Error catalog for transaction imports
ERROR_CATALOG: dict[str, dict] = {
    "IMPORT_001": {
        "code": "IMPORT_001",
        "message": "Source file is missing or could not be read",
        "user_message": "We couldn't read the transactions file.",
        "suggestion": "Check that the file exists and is readable, then try again.",
        "retry_allowed": True,
    },
    "IMPORT_002": {
        "code": "IMPORT_002",
        "message": "Source file is not valid delimited text",
        "user_message": "The transactions file is not a valid CSV document.",
        "suggestion": "Export the file again as UTF-8 CSV with a header line.",
        "retry_allowed": False,
    },
    "IMPORT_003": {
        "code": "IMPORT_003",
        "message": "Resolved categories do not cover every accepted row",
        "user_message": "We encountered an error while importing your transactions.",
        "suggestion": "Please try again. Contact support if the problem persists.",
        "retry_allowed": False,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "CSV row failed validation",
        "user_message": "A row in the transactions file contains an invalid type or value.",
        "suggestion": "Use 'income' or 'outcome' as type and a plain number as value.",
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database transaction failed during import persistence",
        "user_message": "We couldn't save your transactions due to a database error.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Category creation kept conflicting with concurrent imports",
        "user_message": "Another import is creating the same categories right now.",
        "suggestion": "Wait for the other import to finish and try again.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details. Unknown codes map to a generic entry.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def get_suggestion(error_code: str) -> str:
    """Get actionable suggestion for an error code."""
    return get_error(error_code)["suggestion"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable.

    Args:
        error_code: Error code from the catalog

    Returns:
        True if the operation can be retried, False otherwise
    """
    return get_error(error_code)["retry_allowed"]
