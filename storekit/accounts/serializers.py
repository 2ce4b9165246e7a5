"""
Django REST Framework Serializers for accounts API.

Хэш пароля никогда не попадает в ответ.
"""

from django.contrib.auth.models import User
from rest_framework import serializers

from .models import display_name, roles_for


class UserSerializer(serializers.ModelSerializer):
    """
    Публичное представление пользователя.

    Fields:
        - id, name, email
        - roles: ['customer'] или ['admin', 'customer']
        - created_at / updated_at
    """
    name = serializers.SerializerMethodField()
    roles = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField(source='date_joined', read_only=True)
    updated_at = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'roles', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_name(self, obj):
        return display_name(obj)

    def get_roles(self, obj):
        return roles_for(obj)

    def get_updated_at(self, obj):
        profile = getattr(obj, 'profile', None)
        value = profile.updated_at if profile else obj.date_joined
        return serializers.DateTimeField().to_representation(value)
