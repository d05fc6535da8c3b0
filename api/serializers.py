from rest_framework import serializers
from backend.ledger.models import Account, Budget, Category, SavingsGoal, Transaction


class AccountSerializer(serializers.ModelSerializer):
    # balance is maintained by the transaction service only
    balance = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Account
        fields = ['id', 'name', 'account_type', 'balance', 'created_at', 'updated_at']
        read_only_fields = ['balance', 'created_at', 'updated_at']


class CategorySerializer(serializers.ModelSerializer):
    is_default = serializers.ReadOnlyField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'category_type', 'is_default', 'created_at']


class TransactionSerializer(serializers.ModelSerializer):
    """Transaction enriched with account and category display names."""
    account_id = serializers.IntegerField(read_only=True)
    account_name = serializers.CharField(source='account.name', read_only=True)
    category_id = serializers.IntegerField(read_only=True, allow_null=True)
    category_name = serializers.SerializerMethodField()

    def get_category_name(self, obj):
        return obj.category.name if obj.category_id else None

    class Meta:
        model = Transaction
        fields = [
            'id', 'account_id', 'account_name', 'category_id', 'category_name',
            'transaction_date', 'description', 'amount', 'transaction_type',
            'is_recurring', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class BudgetSerializer(serializers.ModelSerializer):
    """Budget with the month's spending computed by BudgetService."""
    category_id = serializers.IntegerField(read_only=True)
    category_name = serializers.CharField(source='category.name', read_only=True)
    spent = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    remaining = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = Budget
        fields = [
            'id', 'category_id', 'category_name', 'budget_month', 'budget_year',
            'budget_amount', 'spent', 'remaining', 'status', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class SavingsGoalSerializer(serializers.ModelSerializer):
    progress = serializers.DecimalField(max_digits=5, decimal_places=2, read_only=True)

    class Meta:
        model = SavingsGoal
        fields = [
            'id', 'goal_name', 'target_amount', 'current_amount', 'target_date',
            'progress', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ExpenseBreakdownSerializer(serializers.Serializer):
    category_name = serializers.CharField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)


class DashboardTotalsSerializer(serializers.Serializer):
    total_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    net_worth = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_income = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    savings = serializers.DecimalField(max_digits=14, decimal_places=2)
    month = serializers.IntegerField()
    year = serializers.IntegerField()


class DashboardSerializer(serializers.Serializer):
    summary = DashboardTotalsSerializer(source='*')
    accounts = AccountSerializer(many=True)
    recent_transactions = TransactionSerializer(many=True)
    expense_breakdown = ExpenseBreakdownSerializer(many=True)
    budget_vs_actual = BudgetSerializer(many=True)
    savings_goals = SavingsGoalSerializer(many=True)
