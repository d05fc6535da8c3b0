from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions

from backend.ledger.repos import RepoError
from backend.services.transaction_service import TransactionService
from .errors import error_response, server_error_response
from .pagination import LedgerPagination
from .serializers import TransactionSerializer


@api_view(['GET', 'POST'])
@permission_classes([permissions.IsAuthenticated])
def transaction_list_create(request):
    """
    GET /api/transactions/ - List user's transactions (paginated, newest first)
    POST /api/transactions/ - Create a transaction and apply it to the account balance
    """
    service = TransactionService()
    if request.method == 'GET':
        try:
            transactions = service.get_all_transactions(request.user)
        except RepoError as e:
            return error_response(e, 'listing transactions')
        paginator = LedgerPagination()
        page = paginator.paginate_queryset(transactions, request)
        return paginator.get_paginated_response(TransactionSerializer(page, many=True).data)

    try:
        transaction = service.create_transaction(request.user, request.data)
    except RepoError as e:
        return error_response(e, 'creating transaction')
    except Exception:
        return server_error_response('creating transaction')

    return Response(TransactionSerializer(transaction).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def recurring_transactions(request):
    """
    GET /api/transactions/recurring/ - List user's recurring transactions
    """
    try:
        transactions = TransactionService().get_all_transactions(request.user, recurring_only=True)
    except RepoError as e:
        return error_response(e, 'listing recurring transactions')
    return Response(TransactionSerializer(transactions, many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([permissions.IsAuthenticated])
def transaction_detail(request, transaction_id):
    """
    GET /api/transactions/{id}/ - Get one transaction
    PUT/PATCH /api/transactions/{id}/ - Update any subset of fields; the balance
        contribution is moved to the resulting amount, type and account
    DELETE /api/transactions/{id}/ - Delete and reverse its balance contribution
    """
    service = TransactionService()
    try:
        if request.method == 'GET':
            transaction = service.get_transaction(request.user, transaction_id)
            return Response(TransactionSerializer(transaction).data)

        if request.method == 'DELETE':
            return Response(service.delete_transaction(request.user, transaction_id), status=status.HTTP_200_OK)

        transaction = service.update_transaction(request.user, transaction_id, request.data)
        return Response(TransactionSerializer(transaction).data, status=status.HTTP_200_OK)

    except RepoError as e:
        return error_response(e, f'{request.method} transaction {transaction_id}')
    except Exception:
        return server_error_response(f'{request.method} transaction {transaction_id}')
