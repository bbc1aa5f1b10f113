"""Database models."""
from ledger.models.category import Category
from ledger.models.transaction import Transaction

__all__ = ["Category", "Transaction"]
