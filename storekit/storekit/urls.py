from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Витрина - главная страница должна быть первой!
    path("", include("storefront.urls")),
    path("admin/", admin.site.urls),

    # Accounts
    path("accounts/", include("accounts.urls")),

    # Back-office (каталог, пользователи, редактор главной)
    path("backoffice/", include("storefront.backoffice_urls")),

    # JSON API
    path("api/", include("storekit.api_urls")),
]

# Медиа (фото товаров) отдаём самим Django
urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
