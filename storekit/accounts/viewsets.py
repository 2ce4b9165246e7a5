"""
Django REST Framework ViewSets for accounts API.

    - AuthViewSet: /api/auth/register|login|me|logout/
    - UserAdminViewSet: /api/admin/users/ (только admin)
"""

import logging

from django.contrib.auth.models import User
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from storekit.pagination import EnvelopePagination

from . import services
from .permissions import IsAdminRole
from .serializers import UserSerializer

logger = logging.getLogger('accounts.auth')


class AuthViewSet(viewsets.ViewSet):
    """
    Регистрация и вход по токену.

    Предоставляет:
        - register: POST /api/auth/register/ {name, email, password} -> 201 user
        - login: POST /api/auth/login/ {email, password} -> {token, user}
        - me: GET /api/auth/me/ -> user
        - logout: POST /api/auth/logout/ -> удаляет токен
    """

    def get_permissions(self):
        if self.action in ('me', 'logout'):
            return [IsAuthenticated()]
        return [AllowAny()]

    @action(detail=False, methods=['post'])
    def register(self, request):
        user = services.register_user(
            request.data.get('name'),
            request.data.get('email'),
            request.data.get('password'),
        )
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def login(self, request):
        user = services.check_credentials(
            request._request,
            request.data.get('email'),
            request.data.get('password'),
        )
        token = services.issue_token(user)
        return Response({
            'message': 'Login successful',
            'token': token.key,
            'user': UserSerializer(user).data,
        })

    @action(detail=False, methods=['get'])
    def me(self, request):
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=['post'])
    def logout(self, request):
        services.revoke_token(request.user)
        return Response({'message': 'Logged out'})


class UserPagination(EnvelopePagination):
    items_key = 'users'
    total_key = 'totalUsers'


class UserAdminViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       viewsets.GenericViewSet):
    """
    Управление пользователями.

    Предоставляет:
        - list: GET /api/admin/users/?page=&limit= (новые первыми)
        - retrieve: GET /api/admin/users/{id}/
        - update: PUT/PATCH /api/admin/users/{id}/ {roles: [...]}
    """
    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]
    pagination_class = UserPagination
    queryset = User.objects.select_related('profile').order_by('-date_joined', '-id')

    def update(self, request, *args, **kwargs):
        user = self.get_object()
        services.update_roles(request.user, user, request.data.get('roles'))
        user.refresh_from_db()
        return Response(UserSerializer(user).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)
