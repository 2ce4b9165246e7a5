from django.urls import include, path

from accounts import views as account_views

from .views import admin as views

urlpatterns = [
    path('', views.dashboard, name='admin_dashboard'),
    # products
    path('products/', views.products, name='admin_products'),
    path('products/new/', views.product_create, name='admin_product_create'),
    path('products/<int:pk>/edit/', views.product_edit, name='admin_product_edit'),
    path('products/<int:pk>/delete/', views.product_delete, name='admin_product_delete'),
    # categories
    path('categories/', views.categories, name='admin_categories'),
    path('categories/new/', views.category_form, name='admin_category_create'),
    path('categories/<int:pk>/edit/', views.category_form, name='admin_category_edit'),
    path('categories/<int:pk>/delete/', views.category_delete, name='admin_category_delete'),
    # tags
    path('tags/', views.tags, name='admin_tags'),
    path('tags/new/', views.tag_form, name='admin_tag_create'),
    path('tags/<int:pk>/edit/', views.tag_form, name='admin_tag_edit'),
    path('tags/<int:pk>/delete/', views.tag_delete, name='admin_tag_delete'),
    # attributes
    path('attributes/', views.attributes, name='admin_attributes'),
    path('attributes/new/', views.attribute_form, name='admin_attribute_create'),
    path('attributes/<int:pk>/edit/', views.attribute_form, name='admin_attribute_edit'),
    path('attributes/<int:pk>/delete/', views.attribute_delete, name='admin_attribute_delete'),
    # users
    path('users/', account_views.admin_users, name='admin_users'),
    path('users/<int:pk>/edit/', account_views.admin_user_edit, name='admin_user_edit'),
    # homepage builder
    path('homepage/', include('pages.urls')),
]
