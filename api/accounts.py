from rest_framework import generics, status, permissions
from rest_framework.response import Response

from backend.ledger.models import Account
from backend.ledger.repos import RepoError
from backend.services.account_service import AccountService
from .errors import error_response
from .serializers import AccountSerializer


class AccountListCreateView(generics.ListCreateAPIView):
    """
    GET /api/accounts/ - List all accounts (with pagination)
    POST /api/accounts/ - Create new account (balance starts at 0.00)
    """
    serializer_class = AccountSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        """Return only accounts for the authenticated user"""
        return Account.objects.filter(user=self.request.user).order_by('-created_at', '-pk')

    def create(self, request, *args, **kwargs):
        try:
            account = AccountService().create_account(request.user, request.data)
        except RepoError as e:
            return error_response(e, 'creating account')
        return Response(AccountSerializer(account).data, status=status.HTTP_201_CREATED)


class AccountDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET /api/accounts/{id}/ - Get account details
    PUT/PATCH /api/accounts/{id}/ - Rename or change the type of an account
    DELETE /api/accounts/{id}/ - Delete account and its transactions
    """
    serializer_class = AccountSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        """Return only accounts for the authenticated user"""
        return Account.objects.filter(user=self.request.user)

    def update(self, request, *args, **kwargs):
        try:
            account = AccountService().update_account(request.user, kwargs['pk'], request.data)
        except RepoError as e:
            return error_response(e, f'updating account {kwargs["pk"]}')
        return Response(AccountSerializer(account).data)

    def destroy(self, request, *args, **kwargs):
        try:
            AccountService().delete_account(request.user, kwargs['pk'])
        except RepoError as e:
            return error_response(e, f'deleting account {kwargs["pk"]}')
        return Response({'message': 'Account deleted successfully'}, status=status.HTTP_200_OK)
