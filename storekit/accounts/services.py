"""
Accounts services: регистрация, вход, выдача токенов и смена ролей.

Используются и HTML-views (сессии), и API (токены).
"""

import logging
import re

from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.authtoken.models import Token

from storekit.errors import AuthenticationError, ConflictError, ValidationFailed

from .models import ROLE_ADMIN, ROLES, UserProfile, admin_count

logger = logging.getLogger('accounts.auth')

EMAIL_RE = re.compile(r'^\S+@\S+\.\S+$')
MIN_PASSWORD_LENGTH = 6


def normalize_email(email):
    return (email or '').strip().lower()


def register_user(name, email, password):
    """
    Создаёт покупателя. username = email в нижнем регистре.

    Raises:
        ValidationFailed: пустые поля, короткий пароль, кривой email
        ConflictError: email уже зарегистрирован
    """
    name = (name or '').strip()
    email = normalize_email(email)
    password = password or ''

    if not name or not email or not password:
        raise ValidationFailed('Please provide name, email, and password')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')
    if not EMAIL_RE.match(email):
        raise ValidationFailed('Please provide a valid email address')

    if User.objects.filter(username__iexact=email).exists() or User.objects.filter(email__iexact=email).exists():
        logger.warning('Registration rejected, email already used: %s', email)
        raise ConflictError('User with this email already exists')

    try:
        with transaction.atomic():
            user = User.objects.create_user(username=email, email=email, password=password)
            UserProfile.objects.update_or_create(user=user, defaults={'name': name})
    except IntegrityError:
        raise ConflictError('User with this email already exists')

    logger.info('User registered: id=%s email=%s', user.pk, email)
    return user


def check_credentials(request, email, password):
    """Проверяет email/пароль. Одинаковое сообщение для неизвестного email и неверного пароля."""
    email = normalize_email(email)
    if not email or not password:
        raise ValidationFailed('Please provide email and password')

    user = authenticate(request, username=email, password=password)
    if user is None:
        logger.warning('Failed login for %s', email)
        raise AuthenticationError('Invalid email or password')
    return user


def issue_token(user):
    """Новый токен при каждом входе: старый удаляется, срок жизни считается заново."""
    Token.objects.filter(user=user).delete()
    token = Token.objects.create(user=user)
    logger.info('Token issued for user id=%s', user.pk)
    return token


def revoke_token(user):
    deleted, _ = Token.objects.filter(user=user).delete()
    return bool(deleted)


def update_roles(actor, user, roles):
    """
    Меняет роли пользователя.

    roles: список из {'admin', 'customer'}. Последний администратор не может
    снять роль admin сам с себя.
    """
    if not isinstance(roles, (list, tuple)) or not all(role in ROLES for role in roles):
        raise ValidationFailed(
            'Invalid roles array. Roles must be an array containing "admin" or "customer".'
        )

    make_admin = ROLE_ADMIN in roles
    if actor.pk == user.pk and user.is_staff and not make_admin and admin_count() <= 1:
        logger.warning('User id=%s tried to drop the last admin role', actor.pk)
        raise ValidationFailed('Cannot remove the last administrator role.')

    if user.is_staff != make_admin:
        user.is_staff = make_admin
        user.save(update_fields=['is_staff'])
        UserProfile.objects.filter(user=user).update(updated_at=timezone.now())
        logger.info('Roles of user id=%s changed by id=%s: %s', user.pk, actor.pk, list(roles))
    return user
