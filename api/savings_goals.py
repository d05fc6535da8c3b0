from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions

from backend.ledger.repos import RepoError
from backend.services.savings_goal_service import SavingsGoalService
from .errors import error_response
from .serializers import SavingsGoalSerializer


@api_view(['GET', 'POST'])
@permission_classes([permissions.IsAuthenticated])
def savings_goal_list_create(request):
    """
    GET /api/savings-goals/ - Goals by target date, undated last
    POST /api/savings-goals/ - Create a goal (current amount defaults to 0)
    """
    service = SavingsGoalService()
    if request.method == 'GET':
        return Response(SavingsGoalSerializer(service.get_all_goals(request.user), many=True).data)

    try:
        goal = service.create_goal(request.user, request.data)
    except RepoError as e:
        return error_response(e, 'creating savings goal')
    return Response(SavingsGoalSerializer(goal).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([permissions.IsAuthenticated])
def savings_goal_detail(request, goal_id):
    service = SavingsGoalService()
    try:
        if request.method == 'GET':
            return Response(SavingsGoalSerializer(service.get_goal(request.user, goal_id)).data)
        if request.method == 'DELETE':
            return Response(service.delete_goal(request.user, goal_id))
        goal = service.update_goal(request.user, goal_id, request.data)
        return Response(SavingsGoalSerializer(goal).data)
    except RepoError as e:
        return error_response(e, f'{request.method} savings goal {goal_id}')
