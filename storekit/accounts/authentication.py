"""
Token authentication with expiry.

Принимает заголовки `Authorization: Bearer <key>` и `Authorization: Token <key>`.
Токен старше TOKEN_TTL_DAYS удаляется и отклоняется с 401.
"""

from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework.authentication import TokenAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed


class ExpiringTokenAuthentication(TokenAuthentication):
    keywords = ('Bearer', 'Token')

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() not in {k.lower().encode() for k in self.keywords}:
            return None
        if len(auth) != 2:
            raise AuthenticationFailed('Invalid token header')
        try:
            key = auth[1].decode()
        except UnicodeError:
            raise AuthenticationFailed('Invalid token header')
        return self.authenticate_credentials(key)

    def authenticate_credentials(self, key):
        user, token = super().authenticate_credentials(key)
        if token_expired(token):
            token.delete()
            raise AuthenticationFailed('Token has expired')
        return user, token

    def authenticate_header(self, request):
        return 'Bearer'


def token_expired(token, now=None):
    now = now or timezone.now()
    return token.created < now - timedelta(days=settings.TOKEN_TTL_DAYS)
