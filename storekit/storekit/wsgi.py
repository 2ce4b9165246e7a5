import os
import sys
from pathlib import Path

# Корень проекта (каталог с manage.py) должен быть в sys.path
PROJECT_DIR = Path(__file__).resolve().parent.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'storekit.production_settings')

from django.core.wsgi import get_wsgi_application  # noqa: E402

application = get_wsgi_application()
