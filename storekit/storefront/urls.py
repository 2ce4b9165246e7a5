from django.urls import path

from . import views

urlpatterns = [
    path('', views.home, name='home'),
    path('catalog/', views.product_list, name='product_list'),
    path('product/<slug:slug>/', views.product_detail, name='product_detail'),
    # cart
    path('cart/', views.view_cart, name='cart'),
    path('cart/add/', views.add_to_cart, name='cart_add'),
    path('cart/update/', views.update_cart, name='cart_update'),
    path('cart/remove/', views.remove_from_cart, name='cart_remove'),
    path('cart/clear/', views.clear_cart, name='cart_clear'),
    path('cart/count/', views.cart_count, name='cart_count'),
    path('checkout/', views.checkout, name='checkout'),
]
