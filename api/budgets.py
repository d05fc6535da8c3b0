from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions

from backend.ledger.repos import RepoError
from backend.services.budget_service import BudgetService
from .errors import error_response
from .serializers import BudgetSerializer


@api_view(['GET', 'POST'])
@permission_classes([permissions.IsAuthenticated])
def budget_list_create(request):
    """
    GET /api/budgets/?month=&year= - User's budgets with this month's spending
    POST /api/budgets/ - Create a budget for one category and month
    """
    service = BudgetService()
    try:
        if request.method == 'GET':
            budgets = service.get_all_budgets(
                request.user,
                month=request.query_params.get('month'),
                year=request.query_params.get('year'),
            )
            return Response(BudgetSerializer(budgets, many=True).data)

        budget = service.create_budget(request.user, request.data)
        return Response(BudgetSerializer(budget).data, status=status.HTTP_201_CREATED)
    except RepoError as e:
        return error_response(e, f'{request.method} budgets')


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([permissions.IsAuthenticated])
def budget_detail(request, budget_id):
    """
    GET/PUT/PATCH/DELETE /api/budgets/{budget_id}/ - Own budgets only
    """
    service = BudgetService()
    try:
        if request.method == 'GET':
            return Response(BudgetSerializer(service.get_budget(request.user, budget_id)).data)
        if request.method == 'DELETE':
            return Response(service.delete_budget(request.user, budget_id))
        budget = service.update_budget(request.user, budget_id, request.data)
        return Response(BudgetSerializer(budget).data)
    except RepoError as e:
        return error_response(e, f'{request.method} budget {budget_id}')
