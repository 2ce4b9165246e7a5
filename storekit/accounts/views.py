"""
Accounts views: вход/регистрация/выход, профиль и управление пользователями
в back-office.
"""

import logging

from django.contrib import messages
from django.contrib.auth import login, logout
from django.contrib.auth.decorators import login_required
from django.contrib.auth.models import User
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from storekit.errors import ConflictError, ServiceError
from storekit.pagination import paginate

from . import services
from .forms import LoginForm, ProfileForm, RegisterForm, UserRolesForm
from .models import UserProfile, roles_for
from .permissions import admin_required

logger = logging.getLogger('accounts.auth')


def _safe_next(request, fallback='home'):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return next_url
    return fallback


# ==================== AUTH VIEWS ====================


def login_view(request):
    """Вход по email и паролю (сессия)."""
    if request.user.is_authenticated:
        return redirect('home')

    form = LoginForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            user = services.check_credentials(
                request, form.cleaned_data['email'], form.cleaned_data['password']
            )
        except ServiceError as exc:
            form.add_error(None, exc.message)
        else:
            login(request, user)
            return redirect(_safe_next(request))

    return render(request, 'accounts/login.html', {
        'form': form,
        'next': request.GET.get('next', ''),
    })


def register_view(request):
    """Регистрация покупателя с последующим входом."""
    if request.user.is_authenticated:
        return redirect('home')

    form = RegisterForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            user = services.register_user(
                form.cleaned_data['name'],
                form.cleaned_data['email'],
                form.cleaned_data['password1'],
            )
        except ConflictError as exc:
            form.add_error('email', exc.message)
        except ServiceError as exc:
            form.add_error(None, exc.message)
        else:
            login(request, user, backend='django.contrib.auth.backends.ModelBackend')
            messages.success(request, 'Реєстрація успішна!')
            return redirect('home')

    return render(request, 'accounts/register.html', {'form': form})


@require_POST
def logout_view(request):
    if request.user.is_authenticated:
        services.revoke_token(request.user)
        logger.info('User id=%s logged out', request.user.pk)
    logout(request)
    return redirect('home')


@login_required
def profile_view(request):
    profile, _ = UserProfile.objects.get_or_create(user=request.user)
    form = ProfileForm(request.POST or None, initial={'name': profile.name})
    if request.method == 'POST' and form.is_valid():
        profile.name = form.cleaned_data['name']
        profile.save(update_fields=['name', 'updated_at'])
        messages.success(request, 'Профіль оновлено')
        return redirect('profile')

    return render(request, 'accounts/profile.html', {
        'form': form,
        'profile': profile,
        'roles': roles_for(request.user),
    })


# ==================== BACKOFFICE USERS ====================


@admin_required
def admin_users(request):
    page = paginate(
        User.objects.select_related('profile').order_by('-date_joined', '-id'),
        request.GET.get('page'),
    )
    rows = [(user, roles_for(user)) for user in page.items]
    return render(request, 'backoffice/users.html', {'page': page, 'rows': rows})


@admin_required
def admin_user_edit(request, pk):
    user = get_object_or_404(User.objects.select_related('profile'), pk=pk)
    form = UserRolesForm(request.POST or None, initial={'roles': roles_for(user)})
    if request.method == 'POST' and form.is_valid():
        try:
            services.update_roles(request.user, user, form.cleaned_data['roles'])
        except ServiceError as exc:
            messages.error(request, exc.message)
        else:
            messages.success(request, 'Ролі оновлено')
            return redirect('admin_users')

    return render(request, 'backoffice/user_form.html', {'form': form, 'target': user})
