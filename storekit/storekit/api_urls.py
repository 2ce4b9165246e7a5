"""
JSON API проекта: DRF-router для каталога, корзины и пользователей
плюс конструктор страниц (page_identifier фиксирован в kwargs).
"""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounts.viewsets import AuthViewSet, UserAdminViewSet
from pages.api import PageElementDetailView, PageElementListView, PublicPageElementsView
from pages.models import HOMEPAGE
from storefront.viewsets import (
    AdminAttributeViewSet,
    AdminCategoryViewSet,
    AdminProductViewSet,
    AdminTagViewSet,
    CartViewSet,
    CategoryViewSet,
    ProductViewSet,
    TagViewSet,
)

router = DefaultRouter()
router.register(r'products', ProductViewSet, basename='api-product')
router.register(r'categories', CategoryViewSet, basename='api-category')
router.register(r'tags', TagViewSet, basename='api-tag')
router.register(r'cart', CartViewSet, basename='api-cart')
router.register(r'auth', AuthViewSet, basename='api-auth')
router.register(r'admin/products', AdminProductViewSet, basename='api-admin-product')
router.register(r'admin/categories', AdminCategoryViewSet, basename='api-admin-category')
router.register(r'admin/tags', AdminTagViewSet, basename='api-admin-tag')
router.register(r'admin/attributes', AdminAttributeViewSet, basename='api-admin-attribute')
router.register(r'admin/users', UserAdminViewSet, basename='api-admin-user')

page_kwargs = {'page_identifier': HOMEPAGE}

urlpatterns = [
    path('page-elements/homepage/', PublicPageElementsView.as_view(), page_kwargs,
         name='api-page-elements'),
    path('admin/page-elements/homepage/', PageElementListView.as_view(), page_kwargs,
         name='api-admin-page-elements'),
    path('admin/page-elements/homepage/<int:element_id>/', PageElementDetailView.as_view(), page_kwargs,
         name='api-admin-page-element-detail'),
    path('', include(router.urls)),
]
