from django.urls import path
from . import views
from .accounts import AccountListCreateView, AccountDetailView
from .budgets import budget_list_create, budget_detail
from .categories import category_list_create, category_detail
from .dashboard import dashboard
from .savings_goals import savings_goal_list_create, savings_goal_detail
from .transactions import (
    transaction_list_create,
    transaction_detail,
    recurring_transactions,
)

urlpatterns = [
    # API Root
    path('', views.api_root, name='api-root'),
    path('health/', views.health, name='health'),

    # Account endpoints
    path('accounts/', AccountListCreateView.as_view(), name='account-list-create'),
    path('accounts/<int:pk>/', AccountDetailView.as_view(), name='account-detail'),

    # Category endpoints
    path('categories/', category_list_create, name='category-list-create'),
    path('categories/<int:category_id>/', category_detail, name='category-detail'),

    # Transaction endpoints
    path('transactions/', transaction_list_create, name='transaction-list-create'),
    path('transactions/recurring/', recurring_transactions, name='transaction-recurring'),
    path('transactions/<int:transaction_id>/', transaction_detail, name='transaction-detail'),

    # Budget endpoints
    path('budgets/', budget_list_create, name='budget-list-create'),
    path('budgets/<int:budget_id>/', budget_detail, name='budget-detail'),

    # Savings goal endpoints
    path('savings-goals/', savings_goal_list_create, name='savings-goal-list-create'),
    path('savings-goals/<int:goal_id>/', savings_goal_detail, name='savings-goal-detail'),

    # Dashboard
    path('dashboard/', dashboard, name='dashboard'),
]
