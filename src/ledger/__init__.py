"""CSV transaction import into a category-linked ledger."""

__version__ = "0.1.0"
