from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import List, Optional, Any

from django.db.models import F, Q, Sum
from django.utils import timezone

from .models import Account, Budget, Category, SavingsGoal, Transaction


# Exceptii pentru layer repo

class RepoError(Exception):
    """Base repository exception."""

class NotFoundError(RepoError):
    """Entity not found in repository or not owned by the caller."""

class ValidationError(RepoError):
    """Validation failed (e.g. missing amount, invalid transaction type)."""

class ConstraintViolation(RepoError):
    """Storage rejected the write (uniqueness or integrity constraint)."""

class TransientStorageError(RepoError):
    """Connection or infrastructure fault while talking to the database."""


# Interfata Repositories

class AccountsRepoInterface(ABC):
    @abstractmethod
    def create(self, *, user, name: str, account_type: str) -> Any:
        """Create and return an account object with a zero balance."""
        raise NotImplementedError

    @abstractmethod
    def get_owned(self, pk: int, user, *, for_update: bool = False) -> Any:
        """Return the account if it exists and belongs to user, else raise NotFoundError."""
        raise NotImplementedError

    @abstractmethod
    def adjust_balance(self, pk: int, delta: Decimal) -> None:
        """Add delta to the account balance in a single atomic increment."""
        raise NotImplementedError

    @abstractmethod
    def list(self, user=None) -> List[Any]:
        """Return accounts, optionally only those of user."""
        raise NotImplementedError


class TransactionsRepoInterface(ABC):
    @abstractmethod
    def create(self, **fields) -> Any:
        """Insert a transaction row and return it."""
        raise NotImplementedError

    @abstractmethod
    def get_owned(self, pk: int, user, *, for_update: bool = False) -> Any:
        """Return the transaction if it belongs to user, else raise NotFoundError."""
        raise NotImplementedError

    @abstractmethod
    def save(self, tx) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, tx) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_enriched(self, pk: int, user=None) -> Any:
        """Return transaction by pk with account and category joined."""
        raise NotImplementedError

    @abstractmethod
    def list(self, user, recurring_only: bool = False) -> List[Any]:
        raise NotImplementedError


# Django implementations

class DjangoAccountsRepo(AccountsRepoInterface):
    def __init__(self, using: Optional[str] = None):
        self.using = using

    def _qs(self):
        return Account.objects.using(self.using) if self.using else Account.objects.all()

    def create(self, *, user, name: str, account_type: str) -> Account:
        account = Account(user=user, name=name, account_type=account_type)
        account.save(using=self.using)
        return account

    def get_owned(self, pk: int, user, *, for_update: bool = False) -> Account:
        qs = self._qs()
        if for_update:
            qs = qs.select_for_update()
        account = qs.filter(pk=pk, user=user).first()
        if account is None:
            raise NotFoundError("Account not found")
        return account

    def adjust_balance(self, pk: int, delta: Decimal) -> None:
        # balance = balance + delta, evaluated by the database under the row lock
        updated = self._qs().filter(pk=pk).update(
            balance=F("balance") + delta,
            updated_at=timezone.now(),
        )
        if updated != 1:
            raise NotFoundError(f"Account id {pk} not found")

    def list(self, user=None) -> List[Account]:
        qs = self._qs()
        if user is not None:
            qs = qs.filter(user=user)
        return list(qs.order_by("-created_at", "-pk"))

    def name_taken(self, user, name: str) -> bool:
        return self._qs().filter(user=user, name=name).exists()

    def total_balance(self, user) -> Decimal:
        total = self._qs().filter(user=user).aggregate(total=Sum("balance"))["total"]
        return total or Decimal("0.00")


class DjangoCategoriesRepo:
    def __init__(self, using: Optional[str] = None):
        self.using = using

    def _qs(self):
        return Category.objects.using(self.using) if self.using else Category.objects.all()

    def create(self, *, user, name: str, category_type: str) -> Category:
        category = Category(user=user, name=name, category_type=category_type)
        category.save(using=self.using)
        return category

    def get_visible(self, pk: int, user) -> Category:
        """Own categories and shared defaults are visible."""
        category = self._qs().filter(Q(user=user) | Q(user__isnull=True), pk=pk).first()
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def get_owned(self, pk: int, user) -> Category:
        category = self._qs().filter(pk=pk, user=user).first()
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def list_visible(self, user) -> List[Category]:
        qs = self._qs().filter(Q(user=user) | Q(user__isnull=True))
        return list(qs.order_by(F("user").asc(nulls_last=True), "name"))


class DjangoTransactionsRepo(TransactionsRepoInterface):
    def __init__(self, using: Optional[str] = None):
        self.using = using

    def _qs(self):
        return Transaction.objects.using(self.using) if self.using else Transaction.objects.all()

    def create(self, **fields) -> Transaction:
        tx = Transaction(**fields)
        tx.save(using=self.using)
        return tx

    def get_owned(self, pk: int, user, *, for_update: bool = False) -> Transaction:
        qs = self._qs()
        if for_update:
            qs = qs.select_for_update()
        tx = qs.filter(pk=pk, user=user).first()
        if tx is None:
            raise NotFoundError("Transaction not found")
        return tx

    def save(self, tx: Transaction) -> None:
        tx.save(using=self.using)

    def delete(self, tx: Transaction) -> None:
        tx.delete(using=self.using)

    def get_enriched(self, pk: int, user=None) -> Transaction:
        qs = self._qs().select_related("account", "category").filter(pk=pk)
        if user is not None:
            qs = qs.filter(user=user)
        tx = qs.first()
        if tx is None:
            raise NotFoundError("Transaction not found")
        return tx

    def list(self, user, recurring_only: bool = False) -> List[Transaction]:
        qs = self._qs().select_related("account", "category").filter(user=user)
        if recurring_only:
            qs = qs.filter(is_recurring=True)
        return list(qs.order_by("-transaction_date", "-created_at"))

    def balance_rows(self, account_id: int):
        """(amount, transaction_type) pairs of every transaction on the account."""
        return list(self._qs().filter(account_id=account_id).values_list("amount", "transaction_type"))

    def total(self, user, transaction_type: str, start: date, end: date, category_id: Optional[int] = None) -> Decimal:
        """Sum of amounts of one type dated within [start, end]."""
        qs = self._qs().filter(
            user=user,
            transaction_type=transaction_type,
            transaction_date__gte=start,
            transaction_date__lte=end,
        )
        if category_id is not None:
            qs = qs.filter(category_id=category_id)
        return qs.aggregate(total=Sum("amount"))["total"] or Decimal("0.00")

    def totals_by_category(self, user, transaction_type: str, start: date, end: date) -> List[dict]:
        """[{'category_name', 'total'}] for categorized rows, largest first."""
        return list(
            self._qs()
            .filter(
                user=user,
                transaction_type=transaction_type,
                transaction_date__gte=start,
                transaction_date__lte=end,
                category__isnull=False,
            )
            .values(category_name=F("category__name"))
            .annotate(total=Sum("amount"))
            .order_by("-total", "category_name")
        )

    def recent(self, user, limit: int = 10) -> List[Transaction]:
        qs = self._qs().select_related("account", "category").filter(user=user)
        return list(qs.order_by("-transaction_date", "-created_at")[:limit])


class DjangoBudgetsRepo:
    def __init__(self, using: Optional[str] = None):
        self.using = using

    def _qs(self):
        qs = Budget.objects.using(self.using) if self.using else Budget.objects.all()
        return qs.select_related("category")

    def create(self, **fields) -> Budget:
        budget = Budget(**fields)
        budget.save(using=self.using)
        return budget

    def get_owned(self, pk: int, user) -> Budget:
        budget = self._qs().filter(pk=pk, user=user).first()
        if budget is None:
            raise NotFoundError("Budget not found")
        return budget

    def exists_for(self, user, category_id: int, month: int, year: int, exclude_pk: Optional[int] = None) -> bool:
        qs = self._qs().filter(user=user, category_id=category_id, budget_month=month, budget_year=year)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.exists()

    def list(self, user, month: Optional[int] = None, year: Optional[int] = None) -> List[Budget]:
        qs = self._qs().filter(user=user)
        if month is not None:
            qs = qs.filter(budget_month=month)
        if year is not None:
            qs = qs.filter(budget_year=year)
        return list(qs.order_by("-budget_year", "-budget_month", "category__name"))


class DjangoSavingsGoalsRepo:
    def __init__(self, using: Optional[str] = None):
        self.using = using

    def _qs(self):
        return SavingsGoal.objects.using(self.using) if self.using else SavingsGoal.objects.all()

    def create(self, **fields) -> SavingsGoal:
        goal = SavingsGoal(**fields)
        goal.save(using=self.using)
        return goal

    def get_owned(self, pk: int, user) -> SavingsGoal:
        goal = self._qs().filter(pk=pk, user=user).first()
        if goal is None:
            raise NotFoundError("Savings goal not found")
        return goal

    def list(self, user) -> List[SavingsGoal]:
        return list(self._qs().filter(user=user).order_by(F("target_date").asc(nulls_last=True), "-created_at"))
