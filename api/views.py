from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import permissions


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def api_root(request):
    """API Root endpoint"""
    return Response({
        'message': 'Finance Tracker API v1.0',
        'endpoints': {
            'health': '/api/health/',
            'accounts': '/api/accounts/',
            'account_detail': '/api/accounts/{id}/',
            'categories': '/api/categories/',
            'transactions': '/api/transactions/',
            'transaction_detail': '/api/transactions/{id}/',
            'recurring_transactions': '/api/transactions/recurring/',
            'budgets': '/api/budgets/',
            'savings_goals': '/api/savings-goals/',
            'dashboard': '/api/dashboard/',
        }
    })


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health(request):
    return Response({'status': 'ok', 'message': 'Finance Tracker API is running'})
