from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions

from backend.ledger.repos import RepoError
from backend.services.category_service import CategoryService
from .errors import error_response
from .serializers import CategorySerializer


@api_view(['GET', 'POST'])
@permission_classes([permissions.IsAuthenticated])
def category_list_create(request):
    """
    GET /api/categories/ - User's categories followed by the default ones
    POST /api/categories/ - Create a category for the authenticated user
    """
    service = CategoryService()
    if request.method == 'GET':
        return Response(CategorySerializer(service.get_all_categories(request.user), many=True).data)

    try:
        category = service.create_category(request.user, request.data)
    except RepoError as e:
        return error_response(e, 'creating category')
    return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([permissions.IsAuthenticated])
def category_detail(request, category_id):
    """
    GET /api/categories/{id}/ - Own or default category
    PUT/PATCH/DELETE /api/categories/{id}/ - Own categories only
    """
    service = CategoryService()
    try:
        if request.method == 'GET':
            return Response(CategorySerializer(service.get_category(request.user, category_id)).data)
        if request.method == 'DELETE':
            service.delete_category(request.user, category_id)
            return Response({'message': 'Category deleted successfully'})
        category = service.update_category(request.user, category_id, request.data)
        return Response(CategorySerializer(category).data)
    except RepoError as e:
        return error_response(e, f'{request.method} category {category_id}')
