"""
Monthly budgets per category.

A budget's spent amount is never stored: it is the sum of the owner's Expense
transactions in that category dated inside the budget month, so it moves with
every transaction create, update and delete.
"""
import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from backend.ledger.balance import EXPENSE
from backend.ledger.models import Budget
from backend.ledger.repos import (
    DjangoBudgetsRepo,
    DjangoCategoriesRepo,
    DjangoTransactionsRepo,
    ValidationError,
)

from .transaction_service import is_missing, normalize_amount, parse_id, require_mapping
from .unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

BUDGET_FIELDS = ("category_id", "budget_month", "budget_year", "budget_amount")


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of the month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def parse_month(raw) -> int:
    month = parse_id(raw, "month")
    if month < 1 or month > 12:
        raise ValidationError("Month must be between 1 and 12")
    return month


def parse_year(raw) -> int:
    year = parse_id(raw, "year")
    if year < 1 or year > 9999:
        raise ValidationError(f"Invalid year: {raw}")
    return year


def determine_budget_status(planned: Decimal, spent: Decimal) -> str:
    if spent == 0:
        return "under_budget"
    if planned <= 0 or spent > planned:
        return "over_budget"
    if spent * 100 >= planned * 80:
        return "on_track"
    return "under_budget"


class BudgetService():
    def __init__(self, repository: Optional[DjangoBudgetsRepo] = None, uow_factory=unit_of_work):
        self.repository = repository or DjangoBudgetsRepo()
        self.uow_factory = uow_factory
        self.categories = DjangoCategoriesRepo()
        self.transactions = DjangoTransactionsRepo()

    def _clean(self, data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
        data = require_mapping(data)
        if not partial and any(is_missing(data.get(f)) for f in BUDGET_FIELDS):
            raise ValidationError("Category ID, month, year, and budget amount are required")

        cleaned: Dict[str, Any] = {}
        if not is_missing(data.get("category_id")):
            cleaned["category_id"] = parse_id(data["category_id"], "category_id")
        if not is_missing(data.get("budget_month")):
            cleaned["budget_month"] = parse_month(data["budget_month"])
        if not is_missing(data.get("budget_year")):
            cleaned["budget_year"] = parse_year(data["budget_year"])
        if not is_missing(data.get("budget_amount")):
            cleaned["budget_amount"] = normalize_amount(data["budget_amount"], allow_zero=True)
        return cleaned

    def _with_spending(self, budget: Budget) -> Budget:
        start, end = month_bounds(budget.budget_year, budget.budget_month)
        budget.spent = self.transactions.total(
            budget.user_id, EXPENSE, start, end, category_id=budget.category_id
        )
        budget.remaining = budget.budget_amount - budget.spent
        budget.status = determine_budget_status(budget.budget_amount, budget.spent)
        return budget

    def _check_unique(self, user, category_id: int, month: int, year: int, exclude_pk=None) -> None:
        if self.repository.exists_for(user, category_id, month, year, exclude_pk=exclude_pk):
            raise ValidationError("Budget already exists for this category, month, and year")

    def create_budget(self, user, data: Dict[str, Any]) -> Budget:
        fields = self._clean(data, partial=False)
        with self.uow_factory():
            category = self.categories.get_visible(fields.pop("category_id"), user)
            self._check_unique(user, category.pk, fields["budget_month"], fields["budget_year"])
            budget = self.repository.create(user=user, category=category, **fields)
        logger.info("Created budget %s for %s (%s %s-%s)", budget.pk, user, category.name,
                    budget.budget_year, budget.budget_month)
        return self._with_spending(budget)

    def get_budget(self, user, budget_id: int) -> Budget:
        return self._with_spending(self.repository.get_owned(budget_id, user))

    def get_all_budgets(self, user, month=None, year=None) -> List[Budget]:
        month = parse_month(month) if not is_missing(month) else None
        year = parse_year(year) if not is_missing(year) else None
        return [self._with_spending(b) for b in self.repository.list(user, month=month, year=year)]

    def update_budget(self, user, budget_id: int, data: Dict[str, Any]) -> Budget:
        changes = self._clean(data, partial=True)
        with self.uow_factory():
            budget = self.repository.get_owned(budget_id, user)
            if "category_id" in changes:
                budget.category = self.categories.get_visible(changes.pop("category_id"), user)
            for field, value in changes.items():
                setattr(budget, field, value)
            self._check_unique(user, budget.category_id, budget.budget_month, budget.budget_year,
                               exclude_pk=budget.pk)
            budget.save()
        return self._with_spending(budget)

    def delete_budget(self, user, budget_id: int) -> Dict[str, str]:
        budget = self.repository.get_owned(budget_id, user)
        budget.delete()
        logger.info("Deleted budget %s for %s", budget_id, user)
        return {"message": "Budget deleted successfully"}
