"""
Atomic unit of work for ledger mutations.

    with unit_of_work() as uow:
        tx = uow.transactions.create(...)
        uow.accounts.adjust_balance(tx.account_id, delta)

Everything done through `uow` commits when the block exits normally and rolls
back when it raises. Database errors are re-raised as ConstraintViolation or
TransientStorageError after the rollback.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from django.db import DEFAULT_DB_ALIAS, DatabaseError, IntegrityError
from django.db import transaction as db_transaction

from backend.ledger.repos import (
    ConstraintViolation,
    DjangoAccountsRepo,
    DjangoCategoriesRepo,
    DjangoTransactionsRepo,
    TransientStorageError,
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Repositories bound to one open database transaction."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using
        self.accounts = DjangoAccountsRepo(using)
        self.categories = DjangoCategoriesRepo(using)
        self.transactions = DjangoTransactionsRepo(using)

    def on_commit(self, func) -> None:
        db_transaction.on_commit(func, using=self.using)


@contextmanager
def unit_of_work(using: Optional[str] = None) -> Iterator[UnitOfWork]:
    using = using or DEFAULT_DB_ALIAS
    try:
        with db_transaction.atomic(using=using):
            yield UnitOfWork(using)
    except IntegrityError as e:
        logger.error("Unit of work rolled back on integrity error: %s", e)
        raise ConstraintViolation(f"Storage constraint violated: {e}") from e
    except DatabaseError as e:
        logger.error("Unit of work rolled back on database error: %s", e)
        raise TransientStorageError(f"Storage unavailable: {e}") from e
