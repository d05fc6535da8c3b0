from decimal import Decimal

from django.conf import settings
from django.db import models

TRANSACTION_TYPE_CHOICES = [
    ("Income", "Income"),
    ("Expense", "Expense"),
]


class Account(models.Model):
    """A user's money account. `balance` is a cached sum of its transactions."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="accounts")
    name = models.CharField(max_length=100)
    account_type = models.CharField(max_length=50)
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        unique_together = ["user", "name"]

    def __str__(self):
        return f"{self.user} - {self.name} ({self.account_type})"


class Category(models.Model):
    # user is null for the shared default categories
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="categories",
    )
    name = models.CharField(max_length=100)
    category_type = models.CharField(max_length=10, choices=TRANSACTION_TYPE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self):
        return f"{self.name} ({self.category_type})"

    @property
    def is_default(self):
        return self.user_id is None


class Transaction(models.Model):
    """Income or expense on one account. `amount` is the unsigned magnitude."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="transactions")
    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name="transactions")
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    transaction_date = models.DateField()
    description = models.CharField(max_length=255, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    transaction_type = models.CharField(max_length=10, choices=TRANSACTION_TYPE_CHOICES)
    is_recurring = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-transaction_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="transaction_amount_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_date} - {self.transaction_type} {self.amount} ({self.description})"


class Budget(models.Model):
    """Planned spending for one category in one calendar month."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="budgets")
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name="budgets")
    budget_month = models.PositiveSmallIntegerField()
    budget_year = models.PositiveSmallIntegerField()
    budget_amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-budget_year", "-budget_month", "category__name"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "category", "budget_month", "budget_year"],
                name="budget_unique_category_month",
            ),
            models.CheckConstraint(
                condition=models.Q(budget_month__gte=1, budget_month__lte=12),
                name="budget_month_in_range",
            ),
            models.CheckConstraint(
                condition=models.Q(budget_amount__gte=0),
                name="budget_amount_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.user} - {self.category_id} {self.budget_year}-{self.budget_month:02d}: {self.budget_amount}"


class SavingsGoal(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="savings_goals")
    goal_name = models.CharField(max_length=100)
    target_amount = models.DecimalField(max_digits=12, decimal_places=2)
    current_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    target_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = [models.F("target_date").asc(nulls_last=True), "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(target_amount__gt=0),
                name="savings_goal_target_positive",
            ),
        ]

    def __str__(self):
        return f"{self.user} - {self.goal_name} ({self.current_amount}/{self.target_amount})"

    @property
    def progress(self) -> Decimal:
        """Percentage of the target reached, capped at 100."""
        if not self.target_amount:
            return Decimal("0.00")
        percent = Decimal(self.current_amount) / Decimal(self.target_amount) * 100
        return min(percent, Decimal("100")).quantize(Decimal("0.01"))
