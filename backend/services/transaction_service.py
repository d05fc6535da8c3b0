"""
Income/expense transactions and the account balances they drive.

Every mutation runs in one unit of work: the transaction row and the signed
balance adjustment of its account commit together or not at all. Update
always reverses the stored contribution before applying the new one, so
amount, type and account can change in any combination.
"""
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from backend.ledger.balance import TRANSACTION_TYPES, reversal_delta, signed_delta
from backend.ledger.models import Transaction
from backend.ledger.repos import DjangoTransactionsRepo, ValidationError

from .unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("account_id", "transaction_date", "amount", "transaction_type")
MAX_AMOUNT = Decimal("9999999999.99")


def is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_mapping(data) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return data


def normalize_amount(raw, *, allow_zero: bool = False) -> Decimal:
    try:
        amount = Decimal(str(raw)).quantize(Decimal("0.01"))
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid amount value: {raw}") from e
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount value: {raw}")
    if amount < 0 and allow_zero:
        raise ValidationError("Amount must not be negative")
    if amount <= 0 and not allow_zero:
        raise ValidationError("Amount must be greater than zero")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}")
    return amount


def parse_date(raw, field: str = "transaction date") -> date:
    """Accept a date, a datetime or their ISO 8601 text forms."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {raw}") from e


def parse_transaction_type(raw) -> str:
    if raw not in TRANSACTION_TYPES:
        raise ValidationError("Transaction type must be either Income or Expense")
    return raw


def parse_id(raw, field: str) -> int:
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid {field}: {raw}")
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {field}: {raw}") from e


def parse_bool(raw) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(raw, str) and raw.lower() in ("false", "0", "no", "off", ""):
        return False
    if isinstance(raw, int):
        return bool(raw)
    raise ValidationError(f"Invalid is_recurring value: {raw}")


def clean_transaction_data(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate request fields and convert them to model values.

    With partial=True only the provided, non-null fields are returned, so the
    caller can merge them over the stored row. Otherwise the required fields
    must all be present.
    """
    data = require_mapping(data)
    if not partial:
        missing = [f for f in REQUIRED_FIELDS if is_missing(data.get(f))]
        if missing:
            raise ValidationError(
                "Account ID, date, amount, and transaction type are required "
                f"(missing: {', '.join(missing)})"
            )

    cleaned: Dict[str, Any] = {}
    if not is_missing(data.get("account_id")):
        cleaned["account_id"] = parse_id(data["account_id"], "account_id")
    if not is_missing(data.get("category_id")):
        cleaned["category_id"] = parse_id(data["category_id"], "category_id")
    if not is_missing(data.get("transaction_date")):
        cleaned["transaction_date"] = parse_date(data["transaction_date"])
    if data.get("description") is not None:
        cleaned["description"] = str(data["description"])
    if not is_missing(data.get("amount")):
        cleaned["amount"] = normalize_amount(data["amount"])
    if not is_missing(data.get("transaction_type")):
        cleaned["transaction_type"] = parse_transaction_type(data["transaction_type"])
    if data.get("is_recurring") is not None:
        cleaned["is_recurring"] = parse_bool(data["is_recurring"])
    elif not partial:
        cleaned["is_recurring"] = False
    return cleaned


class TransactionService():
    def __init__(self, repository: Optional[DjangoTransactionsRepo] = None, uow_factory=unit_of_work):
        self.repository = repository or DjangoTransactionsRepo()
        self.uow_factory = uow_factory

    def create_transaction(self, user, data: Dict[str, Any]) -> Transaction:
        fields = clean_transaction_data(data)
        with self.uow_factory() as uow:
            account = uow.accounts.get_owned(fields.pop("account_id"), user)
            category_id = fields.pop("category_id", None)
            category = uow.categories.get_visible(category_id, user) if category_id is not None else None

            tx = uow.transactions.create(user=user, account=account, category=category, **fields)
            delta = signed_delta(tx.amount, tx.transaction_type)
            uow.accounts.adjust_balance(account.pk, delta)
            result = uow.transactions.get_enriched(tx.pk)

        logger.info("Created transaction %s on account %s (delta %s)", tx.pk, account.pk, delta)
        return result

    def update_transaction(self, user, transaction_id: int, data: Dict[str, Any]) -> Transaction:
        changes = clean_transaction_data(data, partial=True)
        with self.uow_factory() as uow:
            tx = uow.transactions.get_owned(transaction_id, user, for_update=True)
            old_account_id = tx.account_id
            old_reversal = reversal_delta(tx.amount, tx.transaction_type)

            if "account_id" in changes:
                tx.account = uow.accounts.get_owned(changes.pop("account_id"), user)
            if "category_id" in changes:
                tx.category = uow.categories.get_visible(changes.pop("category_id"), user)

            uow.accounts.adjust_balance(old_account_id, old_reversal)

            for field, value in changes.items():
                setattr(tx, field, value)
            uow.transactions.save(tx)

            new_delta = signed_delta(tx.amount, tx.transaction_type)
            uow.accounts.adjust_balance(tx.account_id, new_delta)
            result = uow.transactions.get_enriched(tx.pk)

        logger.info(
            "Updated transaction %s: account %s %s, account %s %s",
            tx.pk, old_account_id, old_reversal, tx.account_id, new_delta,
        )
        return result

    def delete_transaction(self, user, transaction_id: int) -> Dict[str, str]:
        with self.uow_factory() as uow:
            tx = uow.transactions.get_owned(transaction_id, user, for_update=True)
            account_id = tx.account_id
            delta = reversal_delta(tx.amount, tx.transaction_type)
            uow.accounts.adjust_balance(account_id, delta)
            uow.transactions.delete(tx)

        logger.info("Deleted transaction %s on account %s (delta %s)", transaction_id, account_id, delta)
        return {"message": "Transaction deleted successfully"}

    def get_transaction(self, user, transaction_id: int) -> Transaction:
        return self.repository.get_enriched(transaction_id, user=user)

    def get_all_transactions(self, user, recurring_only: bool = False) -> List[Transaction]:
        return self.repository.list(user, recurring_only=recurring_only)
