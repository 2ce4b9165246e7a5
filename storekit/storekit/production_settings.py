"""
Production settings for StoreKit.
"""

from pathlib import Path
import os

from dotenv import load_dotenv

# Переменные окружения загружаем ДО импортирования базовых настроек.
# Приоритет: DJANGO_ENV_FILE -> .env.production -> .env
BASE_DIR = Path(__file__).resolve().parent.parent
_explicit_env_file = os.environ.get('DJANGO_ENV_FILE')
if _explicit_env_file:
    load_dotenv(_explicit_env_file)
else:
    for _candidate in (BASE_DIR / '.env.production', BASE_DIR / '.env'):
        if _candidate.exists():
            load_dotenv(_candidate)
            break

from .settings import *  # noqa: E402,F401,F403

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = False

SECRET_KEY = os.environ.get('SECRET_KEY', SECRET_KEY)

# ALLOWED_HOSTS/CSRF_TRUSTED_ORIGINS читаем из переменных окружения
_allowed_hosts_env = os.environ.get('ALLOWED_HOSTS')
if _allowed_hosts_env:
    _allowed_hosts_env = _allowed_hosts_env.strip()
    if _allowed_hosts_env == '*':
        ALLOWED_HOSTS = ['*']
    else:
        ALLOWED_HOSTS = [h.strip() for h in _allowed_hosts_env.split(',') if h.strip()]
else:
    ALLOWED_HOSTS = ['localhost', '127.0.0.1']

_csrf_origins_env = os.environ.get('CSRF_TRUSTED_ORIGINS')
if _csrf_origins_env:
    CSRF_TRUSTED_ORIGINS = [o.strip() for o in _csrf_origins_env.split(',') if o.strip()]
else:
    # Если явно не задано, формируем из ALLOWED_HOSTS (для доменных имён)
    CSRF_TRUSTED_ORIGINS = []
    for h in ALLOWED_HOSTS:
        if h not in ('localhost', '127.0.0.1') and not h.startswith('*'):
            CSRF_TRUSTED_ORIGINS.extend([f"http://{h}", f"https://{h}"])

# Сессии (а значит и корзина) живут в Redis с записью в БД
REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = int(os.environ.get('REDIS_PORT', '6379'))
REDIS_DB = os.environ.get('REDIS_DB', '0')
REDIS_PASSWORD = os.environ.get('REDIS_PASSWORD', '')
REDIS_USE_SSL = os.environ.get('REDIS_USE_SSL', 'false').lower() in ('1', 'true', 'yes')
REDIS_SCHEME = 'rediss' if REDIS_USE_SSL else 'redis'
REDIS_CACHE_URL = os.environ.get('REDIS_CACHE_URL')
REDIS_MAX_CONNECTIONS = int(os.environ.get('REDIS_MAX_CONNECTIONS', '50'))


def _build_redis_location(db_name: str, explicit_url: str | None = None) -> str:
    """
    Собирает Redis URI, учитывая пароль и протокол.
    При переданном explicit_url возвращает его.
    """
    if explicit_url:
        return explicit_url
    auth_part = f":{REDIS_PASSWORD}@" if REDIS_PASSWORD else ''
    return f"{REDIS_SCHEME}://{auth_part}{REDIS_HOST}:{REDIS_PORT}/{db_name}"


CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': _build_redis_location(REDIS_DB, REDIS_CACHE_URL),
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'PASSWORD': REDIS_PASSWORD or None,
            'IGNORE_EXCEPTIONS': True,  # Не падаем, если Redis недоступен
            'SOCKET_CONNECT_TIMEOUT': 5,
            'SOCKET_TIMEOUT': 5,
            'CONNECTION_POOL_KWARGS': {
                'max_connections': REDIS_MAX_CONNECTIONS,
                'retry_on_timeout': True,
            },
        },
        'KEY_PREFIX': 'storekit',
    },
}

SESSION_ENGINE = 'django.contrib.sessions.backends.cached_db'
SESSION_CACHE_ALIAS = 'default'

# WhiteNoise: сжатие и манифест
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}
WHITENOISE_MAX_AGE = int(os.environ.get('WHITENOISE_MAX_AGE', str(60 * 60 * 24 * 365)))

FILE_UPLOAD_PERMISSIONS = 0o644
FILE_UPLOAD_DIRECTORY_PERMISSIONS = 0o755

# Настройки безопасности
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'SAMEORIGIN'
SECURE_REFERRER_POLICY = 'strict-origin-when-cross-origin'

SECURE_SSL_REDIRECT = os.environ.get('SECURE_SSL_REDIRECT', 'True').lower() in ('1', 'true', 'yes')
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SAMESITE = 'Lax'
CSRF_COOKIE_SAMESITE = 'Lax'
SESSION_COOKIE_HTTPONLY = True

# Логирование: дублируем в файл
LOGGING['handlers']['file'] = {
    'level': 'INFO',
    'class': 'logging.FileHandler',
    'filename': BASE_DIR / 'django.log',
    'formatter': 'verbose',
}
for _logger in LOGGING['loggers'].values():
    _logger['handlers'] = ['console', 'file']
