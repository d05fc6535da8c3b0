from decimal import Decimal

import django.db.models.deletion
import django.db.models.expressions
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("ledger", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Budget",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("budget_month", models.PositiveSmallIntegerField()),
                ("budget_year", models.PositiveSmallIntegerField()),
                ("budget_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="budgets",
                        to="ledger.category",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="budgets",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-budget_year", "-budget_month", "category__name"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "category", "budget_month", "budget_year"),
                        name="budget_unique_category_month",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("budget_month__gte", 1), ("budget_month__lte", 12)),
                        name="budget_month_in_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("budget_amount__gte", 0)),
                        name="budget_amount_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SavingsGoal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("goal_name", models.CharField(max_length=100)),
                ("target_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("current_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("target_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="savings_goals",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": [
                    django.db.models.expressions.OrderBy(
                        django.db.models.expressions.F("target_date"), nulls_last=True
                    ),
                    "-created_at",
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("target_amount__gt", 0)),
                        name="savings_goal_target_positive",
                    ),
                ],
            },
        ),
    ]
