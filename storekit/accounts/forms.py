"""
Forms для accounts: вход, регистрация, профиль, роли.
"""

from django import forms
from django.core.exceptions import ValidationError

from .models import ROLE_ADMIN, ROLE_CUSTOMER


class LoginForm(forms.Form):
    """Форма входа в систему."""

    email = forms.CharField(
        label="Email",
        max_length=254,
        widget=forms.EmailInput(attrs={"class": "form-control", "autocomplete": "email"})
    )
    password = forms.CharField(
        label="Пароль",
        widget=forms.PasswordInput(attrs={"class": "form-control"})
    )


class RegisterForm(forms.Form):
    """Форма регистрации нового покупателя."""

    name = forms.CharField(
        label="Ім'я",
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"})
    )
    email = forms.CharField(
        label="Email",
        max_length=254,
        widget=forms.EmailInput(attrs={"class": "form-control"})
    )
    password1 = forms.CharField(
        label="Пароль",
        widget=forms.PasswordInput(attrs={"class": "form-control"})
    )
    password2 = forms.CharField(
        label="Повтор паролю",
        widget=forms.PasswordInput(attrs={"class": "form-control"})
    )

    def clean(self):
        """Проверка совпадения паролей."""
        data = super().clean()
        password1 = data.get("password1")
        password2 = data.get("password2")

        if password1 and password2 and password1 != password2:
            self.add_error("password2", "Паролі не співпадають")

        return data


class ProfileForm(forms.Form):
    name = forms.CharField(
        label="Ім'я",
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"})
    )

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if not name:
            raise ValidationError("Вкажіть ім'я")
        return name


class UserRolesForm(forms.Form):
    """Back-office: роли пользователя. customer есть всегда."""

    roles = forms.MultipleChoiceField(
        label="Ролі",
        required=False,
        choices=((ROLE_ADMIN, 'Адміністратор'), (ROLE_CUSTOMER, 'Покупець')),
        widget=forms.CheckboxSelectMultiple,
    )
