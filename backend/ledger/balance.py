"""
Balance deltas for income/expense transactions.

An account's cached balance is the sum of the signed deltas of its
transactions. Amounts are stored as unsigned magnitudes; the transaction type
carries the sign.
"""
from decimal import Decimal
from typing import Iterable, Tuple

INCOME = "Income"
EXPENSE = "Expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)


def signed_delta(amount: Decimal, transaction_type: str) -> Decimal:
    """Return +amount for Income and -amount for Expense."""
    amount = Decimal(amount)
    if amount < 0:
        raise ValueError(f"Amount must be a non-negative magnitude, got {amount}")
    if transaction_type == INCOME:
        return amount
    if transaction_type == EXPENSE:
        return -amount
    raise ValueError(f"Invalid transaction type: {transaction_type!r}")


def reversal_delta(amount: Decimal, transaction_type: str) -> Decimal:
    """Return the delta that undoes signed_delta(amount, transaction_type)."""
    return -signed_delta(amount, transaction_type)


def balance_of(rows: Iterable[Tuple[Decimal, str]]) -> Decimal:
    total = Decimal("0.00")
    for amount, transaction_type in rows:
        total += signed_delta(amount, transaction_type)
    return total
