"""
Django admin configuration for accounts app.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User

from .models import UserProfile


class UserProfileInline(admin.StackedInline):
    """Inline для отображения профиля пользователя."""
    model = UserProfile
    can_delete = False
    verbose_name = 'Профіль користувача'
    verbose_name_plural = 'Профіль'
    fields = ('name',)


class UserAdmin(BaseUserAdmin):
    inlines = (UserProfileInline,)
    list_display = ('username', 'email', 'is_staff', 'is_active', 'date_joined')


admin.site.unregister(User)
admin.site.register(User, UserAdmin)
