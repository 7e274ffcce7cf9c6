"""Domain types and records for tally.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in cents (minor units)
- AccountId / CategoryId / TransactionId: Row identifiers

Records are immutable snapshots of a database row. Currency fields are
exposed as Decimal; the store layer converts them to and from cents.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

AccountId = NewType("AccountId", int)
CategoryId = NewType("CategoryId", int)
TransactionId = NewType("TransactionId", int)

SYSTEM_CATEGORY_NAME = "Uncategorized"

# Fixed tags for transactions entered by hand
MANUAL_TRANSACTION_TYPE = "expense"
MANUAL_SOURCE = "manual"


@dataclass(frozen=True)
class Account:
    """A financial account such as a checking account or credit card."""

    id: AccountId
    name: str
    account_type: str
    created_at: str
    updated_at: str
    current_balance: Decimal | None
    institution: str | None
    display_order: int | None
    archived: bool
    include_in_net_worth: bool
    account_number_last4: str | None


@dataclass(frozen=True)
class Category:
    """A spending category, optionally nested under a parent."""

    id: CategoryId
    name: str
    archived: bool
    created_at: str
    display_order: int | None
    parent_category_id: CategoryId | None
    default_discretionary: bool | None
    default_fixed: bool | None
    last_used_date: str | None
    is_system_category: bool


@dataclass(frozen=True)
class Transaction:
    """A single money movement on one account."""

    id: TransactionId
    account_id: AccountId
    date: str
    amount: Decimal
    description: str | None
    category_id: CategoryId | None
    pending: bool
    cleared: bool
    transaction_type: str
    created_at: str
    reconciled: bool
    import_id: str | None
    source: str | None
    payee: str | None
    original_description: str | None
    memo: str | None


@dataclass(frozen=True)
class CreateAccountRequest:
    """User-settable account fields, used for both insert and update."""

    name: str
    account_type: str
    institution: str | None = None
    current_balance: Decimal | None = None
    display_order: int | None = None
    include_in_net_worth: bool | None = None
    account_number_last4: str | None = None


@dataclass(frozen=True)
class CreateCategoryRequest:
    """User-settable category fields, used for both insert and update."""

    name: str
    display_order: int | None = None
    parent_category_id: CategoryId | None = None
    default_discretionary: bool | None = None
    default_fixed: bool | None = None
