"""
Role gates: admin_required для HTML back-office и IsAdminRole для API.
"""

from functools import wraps

from django.contrib.auth.views import redirect_to_login
from django.core.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

from .models import is_admin


def admin_required(view_func):
    """
    Аноним -> редирект на логин, залогиненный не-админ -> 403.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return redirect_to_login(request.get_full_path())
        if not is_admin(request.user):
            raise PermissionDenied('Admin role required')
        return view_func(request, *args, **kwargs)
    return _wrapped_view


class IsAdminRole(BasePermission):
    """401 для анонима (через NotAuthenticated DRF), 403 для покупателя."""
    message = 'Forbidden: admin access required'

    def has_permission(self, request, view):
        return is_admin(request.user)
