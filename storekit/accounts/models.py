from django.db import models
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver

ROLE_ADMIN = 'admin'
ROLE_CUSTOMER = 'customer'
ROLES = (ROLE_ADMIN, ROLE_CUSTOMER)


class UserProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    name = models.CharField(max_length=200, blank=True, verbose_name="Ім'я")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Створено')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Оновлено')

    class Meta:
        verbose_name = 'Профіль користувача'
        verbose_name_plural = 'Профілі користувачів'

    def __str__(self):
        return f'Profile for {self.user.username}'


def roles_for(user):
    """Роли пользователя: customer есть у всех, admin = is_staff."""
    if user.is_staff:
        return [ROLE_ADMIN, ROLE_CUSTOMER]
    return [ROLE_CUSTOMER]


def is_admin(user):
    return bool(user and user.is_authenticated and user.is_active and user.is_staff)


def admin_count():
    return User.objects.filter(is_staff=True, is_active=True).count()


def display_name(user):
    profile = getattr(user, 'profile', None)
    if profile and profile.name:
        return profile.name
    return user.get_full_name() or user.email or user.username


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    """Профиль создаётся сразу вместе с пользователем."""
    if created:
        UserProfile.objects.get_or_create(
            user=instance,
            defaults={'name': instance.get_full_name()},
        )
