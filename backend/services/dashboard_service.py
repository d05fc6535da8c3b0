from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from django.utils import timezone

from backend.ledger.balance import EXPENSE, INCOME
from backend.ledger.repos import DjangoAccountsRepo, DjangoSavingsGoalsRepo, DjangoTransactionsRepo

from .budget_service import BudgetService, month_bounds, parse_month, parse_year
from .transaction_service import is_missing

RECENT_TRANSACTIONS = 10


@dataclass
class DashboardSummary:
    month: int
    year: int
    total_balance: Decimal
    total_income: Decimal
    total_expenses: Decimal
    accounts: list = field(default_factory=list)
    recent_transactions: list = field(default_factory=list)
    expense_breakdown: list = field(default_factory=list)
    budget_vs_actual: list = field(default_factory=list)
    savings_goals: list = field(default_factory=list)

    @property
    def net_worth(self) -> Decimal:
        # accounts are the only assets tracked
        return self.total_balance

    @property
    def savings(self) -> Decimal:
        return self.total_income - self.total_expenses


class DashboardService:
    """Read-only monthly overview built from cached balances and transaction sums."""

    def __init__(self):
        self.accounts = DjangoAccountsRepo()
        self.transactions = DjangoTransactionsRepo()
        self.savings_goals = DjangoSavingsGoalsRepo()
        self.budgets = BudgetService()

    def summary(self, user, month=None, year=None) -> DashboardSummary:
        today = timezone.localdate()
        month = parse_month(month) if not is_missing(month) else today.month
        year = parse_year(year) if not is_missing(year) else today.year
        start, end = month_bounds(year, month)

        return DashboardSummary(
            month=month,
            year=year,
            total_balance=self.accounts.total_balance(user),
            total_income=self.transactions.total(user, INCOME, start, end),
            total_expenses=self.transactions.total(user, EXPENSE, start, end),
            accounts=self.accounts.list(user),
            recent_transactions=self.transactions.recent(user, RECENT_TRANSACTIONS),
            expense_breakdown=self.transactions.totals_by_category(user, EXPENSE, start, end),
            budget_vs_actual=self._budget_vs_actual(user, month, year),
            savings_goals=self.savings_goals.list(user),
        )

    def _budget_vs_actual(self, user, month: int, year: int) -> List:
        budgets = self.budgets.get_all_budgets(user, month=month, year=year)
        return sorted(budgets, key=lambda b: b.category.name)
