from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.auth.models import User
from django.test import TestCase

from backend.ledger.models import Account, Budget, Category, SavingsGoal
from backend.ledger.repos import NotFoundError, ValidationError
from backend.services.budget_service import BudgetService, determine_budget_status, month_bounds
from backend.services.dashboard_service import DashboardService
from backend.services.savings_goal_service import SavingsGoalService
from backend.services.transaction_service import TransactionService


def test_month_bounds_handles_leap_years():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


def test_budget_status_thresholds():
    assert determine_budget_status(Decimal("100"), Decimal("0")) == "under_budget"
    assert determine_budget_status(Decimal("100"), Decimal("79.99")) == "under_budget"
    assert determine_budget_status(Decimal("100"), Decimal("80")) == "on_track"
    assert determine_budget_status(Decimal("100"), Decimal("100")) == "on_track"
    assert determine_budget_status(Decimal("100"), Decimal("100.01")) == "over_budget"
    assert determine_budget_status(Decimal("0"), Decimal("1")) == "over_budget"


class LedgerTestCase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="hana", password="secret")
        self.other = User.objects.create_user(username="ivan", password="secret")
        self.account = Account.objects.create(user=self.user, name="Checking", account_type="Checking")
        self.food = Category.objects.create(user=None, name="Food", category_type="Expense")
        self.rent = Category.objects.create(user=self.user, name="Rent", category_type="Expense")
        self.salary = Category.objects.create(user=None, name="Salary", category_type="Income")
        self.transactions = TransactionService()

    def record(self, amount, transaction_type, category, on="2024-03-10", account=None):
        return self.transactions.create_transaction(self.user, {
            "account_id": (account or self.account).pk,
            "category_id": category.pk if category else None,
            "transaction_date": on,
            "amount": amount,
            "transaction_type": transaction_type,
        })


class BudgetServiceTest(LedgerTestCase):
    def setUp(self):
        super().setUp()
        self.service = BudgetService()

    def budget(self, category=None, month=3, year=2024, amount="200.00"):
        return self.service.create_budget(self.user, {
            "category_id": (category or self.food).pk,
            "budget_month": month,
            "budget_year": year,
            "budget_amount": amount,
        })

    def test_spent_follows_transaction_changes(self):
        budget = self.budget()
        self.assertEqual(budget.spent, Decimal("0.00"))

        tx = self.record("50.00", "Expense", self.food)
        self.record("30.00", "Expense", self.food, on="2024-04-01")
        self.record("99.00", "Expense", self.rent)
        self.record("500.00", "Income", self.salary)
        self.assertEqual(self.service.get_budget(self.user, budget.pk).spent, Decimal("50.00"))

        self.transactions.update_transaction(self.user, tx.pk, {"amount": "170"})
        budget = self.service.get_budget(self.user, budget.pk)
        self.assertEqual(budget.spent, Decimal("170.00"))
        self.assertEqual(budget.remaining, Decimal("30.00"))
        self.assertEqual(budget.status, "on_track")

        self.transactions.delete_transaction(self.user, tx.pk)
        self.assertEqual(self.service.get_budget(self.user, budget.pk).spent, Decimal("0.00"))

    def test_spending_of_other_users_is_ignored(self):
        budget = self.budget()
        theirs = Account.objects.create(user=self.other, name="Theirs", account_type="Cash")
        TransactionService().create_transaction(self.other, {
            "account_id": theirs.pk,
            "category_id": self.food.pk,
            "transaction_date": "2024-03-05",
            "amount": "75",
            "transaction_type": "Expense",
        })
        self.assertEqual(self.service.get_budget(self.user, budget.pk).spent, Decimal("0.00"))

    def test_required_fields_and_month_range(self):
        with self.assertRaises(ValidationError):
            self.service.create_budget(self.user, {"category_id": self.food.pk, "budget_month": 3})
        with self.assertRaises(ValidationError) as ctx:
            self.budget(month=13)
        self.assertIn("between 1 and 12", str(ctx.exception))
        with self.assertRaises(ValidationError):
            self.budget(amount="-1")
        self.assertEqual(Budget.objects.count(), 0)

    def test_one_budget_per_category_and_month(self):
        self.budget()
        with self.assertRaises(ValidationError) as ctx:
            self.budget(amount="10")
        self.assertIn("already exists", str(ctx.exception))
        self.budget(month=4)
        self.assertEqual(Budget.objects.count(), 2)

    def test_update_cannot_collide_with_another_budget(self):
        self.budget()
        april = self.budget(month=4)
        with self.assertRaises(ValidationError):
            self.service.update_budget(self.user, april.pk, {"budget_month": 3})
        april.refresh_from_db()
        self.assertEqual(april.budget_month, 4)

    def test_partial_update_keeps_other_fields(self):
        budget = self.budget()
        updated = self.service.update_budget(self.user, budget.pk, {"budget_amount": "350", "budget_year": None})
        self.assertEqual(updated.budget_amount, Decimal("350.00"))
        self.assertEqual(updated.budget_year, 2024)
        self.assertEqual(updated.category, self.food)

    def test_category_must_be_visible(self):
        theirs = Category.objects.create(user=self.other, name="Boats", category_type="Expense")
        with self.assertRaises(NotFoundError):
            self.budget(category=theirs)

    def test_budgets_are_owner_scoped(self):
        budget = self.budget()
        with self.assertRaises(NotFoundError):
            self.service.get_budget(self.other, budget.pk)
        with self.assertRaises(NotFoundError):
            self.service.delete_budget(self.other, budget.pk)
        self.assertEqual(self.service.get_all_budgets(self.other), [])

    def test_list_by_month(self):
        self.budget()
        self.budget(category=self.rent, month=4)
        self.assertEqual([b.category.name for b in self.service.get_all_budgets(self.user, month="4")], ["Rent"])
        self.assertEqual(len(self.service.get_all_budgets(self.user, year="2024")), 2)
        with self.assertRaises(ValidationError):
            self.service.get_all_budgets(self.user, month="0")

    def test_delete(self):
        budget = self.budget()
        self.assertEqual(self.service.delete_budget(self.user, budget.pk), {"message": "Budget deleted successfully"})
        self.assertFalse(Budget.objects.exists())


class SavingsGoalServiceTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="jo", password="secret")
        self.service = SavingsGoalService()

    def test_create_defaults_current_amount(self):
        goal = self.service.create_goal(self.user, {"goal_name": " Holiday ", "target_amount": "1200"})
        self.assertEqual(goal.goal_name, "Holiday")
        self.assertEqual(goal.current_amount, Decimal("0.00"))
        self.assertIsNone(goal.target_date)
        self.assertEqual(goal.progress, Decimal("0.00"))

    def test_target_must_be_positive(self):
        for target in ("0", "-10", "abc"):
            with self.assertRaises(ValidationError):
                self.service.create_goal(self.user, {"goal_name": "Car", "target_amount": target})
        with self.assertRaises(ValidationError):
            self.service.create_goal(self.user, {"goal_name": "   ", "target_amount": "10"})
        self.assertFalse(SavingsGoal.objects.exists())

    def test_update_merges_and_reports_progress(self):
        goal = self.service.create_goal(self.user, {
            "goal_name": "Laptop", "target_amount": "800", "target_date": "2024-12-01",
        })
        updated = self.service.update_goal(self.user, goal.pk, {"current_amount": "200", "goal_name": None})
        self.assertEqual(updated.goal_name, "Laptop")
        self.assertEqual(updated.target_date, date(2024, 12, 1))
        self.assertEqual(updated.progress, Decimal("25.00"))

        with self.assertRaises(ValidationError):
            self.service.update_goal(self.user, goal.pk, {"target_amount": "0"})

    def test_list_orders_undated_goals_last(self):
        undated = self.service.create_goal(self.user, {"goal_name": "Someday", "target_amount": "10"})
        late = self.service.create_goal(self.user, {"goal_name": "Late", "target_amount": "10", "target_date": "2025-06-01"})
        soon = self.service.create_goal(self.user, {"goal_name": "Soon", "target_amount": "10", "target_date": "2024-06-01"})
        self.assertEqual(self.service.get_all_goals(self.user), [soon, late, undated])

    def test_goals_are_owner_scoped(self):
        goal = self.service.create_goal(self.user, {"goal_name": "Bike", "target_amount": "300"})
        stranger = User.objects.create_user(username="kim", password="secret")
        with self.assertRaises(NotFoundError):
            self.service.update_goal(stranger, goal.pk, {"current_amount": "1"})
        with self.assertRaises(NotFoundError):
            self.service.delete_goal(stranger, goal.pk)


class DashboardServiceTest(LedgerTestCase):
    def setUp(self):
        super().setUp()
        self.savings = Account.objects.create(user=self.user, name="Savings", account_type="Savings")
        self.service = DashboardService()

    def test_totals_track_account_balances(self):
        self.record("1000.00", "Income", self.salary)
        groceries = self.record("120.50", "Expense", self.food)
        self.record("300.00", "Income", None, account=self.savings)
        self.record("40.00", "Expense", self.food, on="2024-02-28")

        summary = self.service.summary(self.user, month=3, year=2024)
        self.assertEqual(summary.total_balance, Decimal("1139.50"))
        self.assertEqual(summary.net_worth, summary.total_balance)
        self.assertEqual(summary.total_income, Decimal("1300.00"))
        self.assertEqual(summary.total_expenses, Decimal("120.50"))
        self.assertEqual(summary.savings, Decimal("1179.50"))

        self.transactions.update_transaction(self.user, groceries.pk, {"account_id": self.savings.pk})
        self.transactions.delete_transaction(self.user, groceries.pk)
        summary = self.service.summary(self.user, month=3, year=2024)
        self.assertEqual(summary.total_balance, Decimal("1260.00"))
        self.assertEqual(
            summary.total_balance,
            sum((a.balance for a in Account.objects.filter(user=self.user)), Decimal("0")),
        )

    def test_expense_breakdown_and_budgets(self):
        self.record("20.00", "Expense", self.food)
        self.record("15.00", "Expense", self.food)
        self.record("900.00", "Expense", self.rent)
        self.record("5.00", "Expense", None)
        BudgetService().create_budget(self.user, {
            "category_id": self.food.pk, "budget_month": 3, "budget_year": 2024, "budget_amount": "30",
        })

        summary = self.service.summary(self.user, month="3", year="2024")
        self.assertEqual(
            [(row["category_name"], row["total"]) for row in summary.expense_breakdown],
            [("Rent", Decimal("900.00")), ("Food", Decimal("35.00"))],
        )
        self.assertEqual(len(summary.budget_vs_actual), 1)
        self.assertEqual(summary.budget_vs_actual[0].spent, Decimal("35.00"))
        self.assertEqual(summary.budget_vs_actual[0].status, "over_budget")
        self.assertEqual(len(summary.recent_transactions), 4)

    def test_defaults_to_current_month(self):
        with mock.patch("backend.services.dashboard_service.timezone.localdate", return_value=date(2024, 3, 20)):
            summary = self.service.summary(self.user)
        self.assertEqual((summary.month, summary.year), (3, 2024))
        self.assertEqual(summary.total_income, Decimal("0.00"))

    def test_invalid_period_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.summary(self.user, month="13", year="2024")
        with self.assertRaises(ValidationError):
            self.service.summary(self.user, month="3", year="abc")

    def test_other_users_data_excluded(self):
        theirs = Account.objects.create(user=self.other, name="Theirs", account_type="Cash")
        TransactionService().create_transaction(self.other, {
            "account_id": theirs.pk, "transaction_date": "2024-03-02", "amount": "64", "transaction_type": "Income",
        })
        summary = self.service.summary(self.user, month=3, year=2024)
        self.assertEqual(summary.total_balance, Decimal("0.00"))
        self.assertEqual(summary.total_income, Decimal("0.00"))
        self.assertEqual(summary.accounts, [self.savings, self.account])
