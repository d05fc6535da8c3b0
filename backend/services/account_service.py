import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from backend.ledger.balance import balance_of
from backend.ledger.models import Account
from backend.ledger.repos import DjangoAccountsRepo, DjangoTransactionsRepo, ValidationError

from .transaction_service import require_mapping
from .unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


@dataclass
class BalanceAudit:
    account_id: int
    name: str
    stored: Decimal
    expected: Decimal

    @property
    def drift(self) -> Decimal:
        return self.expected - self.stored

    @property
    def consistent(self) -> bool:
        return self.drift == 0


class AccountService():
    def __init__(self, repository: Optional[DjangoAccountsRepo] = None, uow_factory=unit_of_work):
        self.repository = repository or DjangoAccountsRepo()
        self.transactions = DjangoTransactionsRepo()
        self.uow_factory = uow_factory

    def _clean(self, data: Dict[str, Any], partial: bool) -> Dict[str, str]:
        data = require_mapping(data)
        cleaned = {}
        for field in ("name", "account_type"):
            value = data.get(field)
            if value is None or not str(value).strip():
                if not partial:
                    raise ValidationError("Account name and type are required")
                continue
            cleaned[field] = str(value).strip()
        return cleaned

    def create_account(self, user, data: Dict[str, Any]) -> Account:
        fields = self._clean(data, partial=False)
        with self.uow_factory() as uow:
            if uow.accounts.name_taken(user, fields["name"]):
                raise ValidationError(f"Account '{fields['name']}' already exists")
            account = uow.accounts.create(user=user, **fields)
        logger.info("Created account %s for %s", account.pk, user)
        return account

    def get_account(self, user, account_id: int) -> Account:
        return self.repository.get_owned(account_id, user)

    def get_all_accounts(self, user) -> List[Account]:
        return self.repository.list(user)

    def update_account(self, user, account_id: int, data: Dict[str, Any]) -> Account:
        """Rename or retype an account. The balance is never written here."""
        fields = self._clean(data, partial=True)
        with self.uow_factory() as uow:
            account = uow.accounts.get_owned(account_id, user, for_update=True)
            if "name" in fields and fields["name"] != account.name:
                if uow.accounts.name_taken(user, fields["name"]):
                    raise ValidationError(f"Account '{fields['name']}' already exists")
            for field, value in fields.items():
                setattr(account, field, value)
            account.save(using=uow.using, update_fields=list(fields) + ["updated_at"])
        return account

    def delete_account(self, user, account_id: int) -> None:
        """Delete the account together with its transactions."""
        with self.uow_factory() as uow:
            account = uow.accounts.get_owned(account_id, user, for_update=True)
            account.delete(using=uow.using)
        logger.info("Deleted account %s for %s", account_id, user)

    def audit_balances(self, user=None) -> List[BalanceAudit]:
        audits = []
        for account in self.repository.list(user):
            expected = balance_of(self.transactions.balance_rows(account.pk))
            audits.append(BalanceAudit(account.pk, account.name, account.balance, expected))
        return audits

    def repair_balance(self, account: Account) -> Decimal:
        """
        Bring the cached balance back in line with the account's transactions.

        The drift is applied as a signed delta while the account row is locked,
        so a concurrent mutation is either fully before or fully after the fix.
        Returns the applied delta.
        """
        with self.uow_factory() as uow:
            locked = uow.accounts.get_owned(account.pk, account.user_id, for_update=True)
            expected = balance_of(uow.transactions.balance_rows(locked.pk))
            drift = expected - locked.balance
            if drift:
                uow.accounts.adjust_balance(locked.pk, drift)
                logger.warning("Repaired balance of account %s by %s", locked.pk, drift)
        return drift
