"""Domain models and types for tally.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Currency conversion and category tree logic separated from storage
"""

from tally.domain.models import (
    Account,
    AccountId,
    Category,
    CategoryId,
    CreateAccountRequest,
    CreateCategoryRequest,
    Money,
    Transaction,
    TransactionId,
)

__all__ = [
    "Account",
    "AccountId",
    "Category",
    "CategoryId",
    "CreateAccountRequest",
    "CreateCategoryRequest",
    "Money",
    "Transaction",
    "TransactionId",
]
