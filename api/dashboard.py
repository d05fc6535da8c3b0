from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import permissions

from backend.ledger.repos import RepoError
from backend.services.dashboard_service import DashboardService
from .errors import error_response
from .serializers import DashboardSerializer


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def dashboard(request):
    """
    GET /api/dashboard/?month=&year= - Balances, monthly income and expenses,
    expense breakdown, budget vs actual and savings goals (default: current month)
    """
    try:
        summary = DashboardService().summary(
            request.user,
            month=request.query_params.get('month'),
            year=request.query_params.get('year'),
        )
    except RepoError as e:
        return error_response(e, 'building dashboard')
    return Response(DashboardSerializer(summary).data)
